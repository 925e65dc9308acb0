"""Compile observability — structured events for every build step.

Covers:
- **Assets**: bundler runs and per-asset reconciliation
- **Contents**: renders and output-file decisions (written / skipped)
- **Compiles**: overall totals

All events are frozen dataclasses with nanosecond timestamps.

Quick Start:
    >>> from enclave.observability import BuildCollector
    >>> collector = BuildCollector(verbose=True)
    >>> # Compiler(config, collector=collector).compile_everything(site)
    >>> collector.log.stats()["total"]
    0

"""

from enclave.observability.collector import BuildCollector
from enclave.observability.events import (
    AssetReconciled,
    AssetsBundled,
    BuildEvent,
    CompileEvent,
    CompileFinished,
    ContentRendered,
    now_ns,
)
from enclave.observability.log import EventLog

__all__ = [
    "AssetReconciled",
    "AssetsBundled",
    "BuildCollector",
    "BuildEvent",
    "CompileEvent",
    "CompileFinished",
    "ContentRendered",
    "EventLog",
    "now_ns",
]
