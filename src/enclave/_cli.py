"""Enclave CLI — enclave build.

Entry point for the ``enclave`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the enclave CLI."""
    parser = argparse.ArgumentParser(
        prog="enclave",
        description="Static-site compiler with external asset bundling.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # enclave build
    build_parser = subparsers.add_parser(
        "build",
        help="Compile the site into its output directory",
    )
    build_parser.add_argument("root", nargs="?", default=".", help="Site root directory")
    build_parser.add_argument(
        "--output", default=None, help="Output directory (default: tmp/build-<env>)",
    )
    build_parser.add_argument("--env", default=None, help="Build environment name")
    build_parser.add_argument(
        "--minify", action="store_true", default=None, help="Let the bundler minify output",
    )
    build_parser.add_argument(
        "--cache", action="store_true", default=None, help="Enable the bundler cache",
    )
    build_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Print every compile step",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from enclave import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from enclave._errors import EnclaveError
    from enclave.app import build

    if args.command == "build":
        try:
            build(
                root=args.root,
                verbose=args.verbose,
                output_root=args.output,
                env=args.env,
                minify=args.minify,
                cache=args.cache,
            )
        except EnclaveError as exc:
            print(f"enclave: {exc}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
