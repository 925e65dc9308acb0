"""Enclave application — load a site from disk and compile it.

``build`` is the primary entry point: it reads ``enclave.yaml`` and
``site.py`` from the site root, runs the site rules, compiles everything and
prints a summary to stderr.
"""

import sys
import time
from pathlib import Path

from enclave.config_loader import load_config
from enclave.export.compiler import CompileResult, Compiler
from enclave.observability.collector import BuildCollector
from enclave.site_loader import build_site, load_site_definition


def build(root: str | Path = ".", *, verbose: bool = False, **kwargs: object) -> CompileResult:
    """Compile the site at *root* into its output directory.

    Args:
        root: Path to the site root directory.
        verbose: Print a line per compile event to stderr.
        **kwargs: Override EnclaveConfig fields.

    Returns:
        The compile result.

    """
    t0 = time.perf_counter()

    config = load_config(Path(root), **kwargs)
    definition = load_site_definition(config.root)
    site = build_site(config, definition)
    load_ms = (time.perf_counter() - t0) * 1000

    print(
        f"  enclave {config.env} build of {config.root} "
        f"({len(site.route_identifiers)} routes, loaded in {load_ms:.0f}ms)",
        file=sys.stderr,
    )

    compiler = Compiler(config, collector=BuildCollector(verbose=verbose))
    result = compiler.compile_everything(site)

    _print_compile_summary(result)
    return result


def _print_compile_summary(result: CompileResult) -> None:
    """Print compile completion summary to stderr."""
    lines = [
        "",
        "─" * 41,
        f"  Compiled {result.total_pages} page{'s' if result.total_pages != 1 else ''}"
        f" ({result.written} written)",
    ]
    if result.total_assets > 0:
        lines.append(
            f"  Bundled {result.total_assets} asset{'s' if result.total_assets != 1 else ''}"
        )
    skipped = sum(1 for f in result.files if f.status == "outside_root")
    if skipped:
        lines.append(f"  Skipped {skipped} outside the output root")
    lines.append(f"  Output: {result.output_dir}")
    lines.append(f"  Done in {result.duration_ms:.0f}ms")

    print("\n".join(lines), file=sys.stderr)
