"""Shared test fixtures for enclave."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from enclave.config import EnclaveConfig
from enclave.site import Site


@pytest.fixture
def tmp_site(tmp_path: Path) -> Path:
    """Create an empty site root with assets/, contents/ and layouts/ dirs."""
    for name in ("assets", "contents", "layouts"):
        (tmp_path / name).mkdir()
    return tmp_path


@pytest.fixture
def config(tmp_site: Path) -> EnclaveConfig:
    """Config writing into ``<site>/public`` with a fixed environment."""
    return EnclaveConfig(root=tmp_site, output_root="public", env="test")


@pytest.fixture
def write_source(tmp_site: Path) -> Callable[[str, str], Path]:
    """Return a helper that writes ``text`` at ``relpath`` under the site root."""

    def write(relpath: str, text: str) -> Path:
        path = tmp_site / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return write


@pytest.fixture
def make_site(config: EnclaveConfig) -> Callable[..., Site]:
    """Return a helper that builds a Site and runs the given rules on it."""

    def make(rules: Callable[..., object], **site_options: Any) -> Site:
        site = Site(config, **site_options)
        site.rules(rules)
        return site

    return make


def bundler_report(*blocks: tuple[str, list[str]]) -> str:
    """Render a bundler report in the format the compiler parses."""
    lines = ["✨  Built in 1.20s.", ""]
    for index, (output, inputs) in enumerate(blocks):
        if index:
            lines.append("")
        lines.append(f"{output}    1.2 KB    45ms")
        for position, reported_input in enumerate(inputs):
            branch = "└──" if position == len(inputs) - 1 else "├──"
            lines.append(f"{branch} {reported_input}    512 B    12ms")
    lines.append("Done in 1.80s.")
    return "\n".join(lines) + "\n"


def fake_bundler(
    site_root: Path,
    report: str,
    outputs: dict[str, str] | None = None,
    *,
    returncode: int = 0,
) -> Callable[..., subprocess.CompletedProcess[str]]:
    """Build a ``subprocess.run`` replacement that writes *outputs* and returns *report*."""

    def run(command: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        for relpath, text in (outputs or {}).items():
            path = site_root / relpath
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        stderr = "" if returncode == 0 else "🚨 Build failed."
        return subprocess.CompletedProcess(command, returncode, stdout=report, stderr=stderr)

    return run


@pytest.fixture
def report() -> Callable[..., str]:
    """Expose :func:`bundler_report` to tests."""
    return bundler_report


@pytest.fixture
def bundler() -> Callable[..., Callable[..., subprocess.CompletedProcess[str]]]:
    """Expose :func:`fake_bundler` to tests."""
    return fake_bundler
