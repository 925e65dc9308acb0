"""Asset bundler — command construction, invocation and report parsing.

The bundler (Parcel by default) prints a human-oriented report such as::

    ✨  Built in 1.20s.

    public/assets/application.js     1.2 KB    45ms
    ├── assets/application.js          512 B    12ms
    └── assets/vendor.js               700 B    20ms

    public/assets/application.css    240 B    30ms
    └── assets/application.css         240 B    10ms
    Done in 1.80s.

Each block names one output file followed by the input files that went into
it.  Paths are relative to the directory the bundler ran in.
"""

from __future__ import annotations

import re
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from enclave._errors import AssetCompilationFailed, AssetReportUnparseable

if TYPE_CHECKING:
    from enclave.config import EnclaveConfig

_REPORT = re.compile(r"^✨[^\n]+\n\n(?P<files>.*)Done in.*\Z", re.MULTILINE | re.DOTALL)
_LINE = re.compile(r"(?P<path>.*?)\s+(?P<size>[0-9.]+\s*[A-Z]?B)\s+(?P<time>[0-9.]+[a-z]?s)")
_INPUT_SEPARATOR = re.compile(r"\n\s*(?:└|├)── ")


@dataclass(frozen=True, slots=True)
class BundledFile:
    """One output file from the bundler report.

    Attributes:
        output: Output path as reported (relative to the bundler's cwd).
        inputs: Input paths that went into the output, as reported.

    """

    output: str
    inputs: tuple[str, ...]


def build_command(config: EnclaveConfig, entrypoints: Sequence[Path]) -> list[str]:
    """Return the bundler command line for *entrypoints*."""
    command = list(config.bundler_command)

    if not config.minify:
        command.append("--no-minify")

    cache_dir = config.cache_dir_path
    if config.cache and cache_dir is not None:
        command.extend(["--cache-dir", str(cache_dir)])
    else:
        command.append("--no-cache")

    command.extend(["--dist-dir", str(config.output_assets_path)])
    command.extend(["--public-url", config.output_assets_path.name])
    command.extend(str(path) for path in entrypoints)

    return command


def run_bundler(command: Sequence[str], *, cwd: Path) -> str:
    """Run the bundler to completion and return its standard output.

    Blocks until the process exits; there is no timeout.

    Raises:
        AssetCompilationFailed: If the process cannot start or exits non-zero.

    """
    try:
        completed = subprocess.run(
            list(command),
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=False,
        )
    except OSError as exc:
        msg = f"Asset compilation failed: could not run {command[0]!r}: {exc}"
        raise AssetCompilationFailed(msg) from exc

    if completed.returncode != 0:
        msg = f"Asset compilation failed (exit status {completed.returncode})"
        raise AssetCompilationFailed(
            msg,
            returncode=completed.returncode,
            stderr=completed.stderr or "",
        )

    return completed.stdout or ""


def parse_bundler_report(report: str) -> tuple[BundledFile, ...]:
    """Parse the bundler's text report into output/input groups.

    Raises:
        AssetReportUnparseable: If the report does not have the expected shape.

    """
    match = _REPORT.search(report)
    if match is None:
        msg = "Asset compilation output parsing failed: unrecognised report"
        raise AssetReportUnparseable(msg)

    bundled: list[BundledFile] = []
    for block in match["files"].split("\n\n"):
        block = block.strip()
        if not block:
            continue
        output_line, *input_lines = _INPUT_SEPARATOR.split(block)
        bundled.append(BundledFile(
            output=_path_of(output_line),
            inputs=tuple(_path_of(line) for line in input_lines),
        ))

    if not bundled:
        msg = "Asset compilation output parsing failed: no output files listed"
        raise AssetReportUnparseable(msg)

    return tuple(bundled)


def _path_of(line: str) -> str:
    """Strip the trailing size and time columns from a report line."""
    match = _LINE.fullmatch(line.strip())
    if match is None:
        msg = f"Asset compilation output parsing failed: bad line {line.strip()!r}"
        raise AssetReportUnparseable(msg)
    return match["path"]
