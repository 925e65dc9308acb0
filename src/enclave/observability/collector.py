"""Build collector — records compile events and reports progress.

The compiler calls the ``record_*`` methods as it works.  Every event lands
in the :class:`EventLog`; with ``verbose=True`` a one-line summary of each is
also printed to stderr.

Thread Safety:
    The collector delegates storage to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

import sys
from collections.abc import Sequence

from enclave.observability.events import (
    AssetReconciled,
    AssetsBundled,
    BuildEvent,
    CompileFinished,
    ContentRendered,
    now_ns,
)
from enclave.observability.log import EventLog


class BuildCollector:
    """Event collector for one or more compiles.

    Args:
        log: The EventLog to store events in (a fresh one by default).
        verbose: Print a line per event to stderr.

    """

    __slots__ = ("_log", "_verbose")

    def __init__(self, log: EventLog | None = None, *, verbose: bool = False) -> None:
        self._log = log if log is not None else EventLog()
        self._verbose = verbose

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    @property
    def verbose(self) -> bool:
        return self._verbose

    # ----- Asset events -----

    def record_bundle(
        self,
        command: Sequence[str],
        *,
        entrypoints: int = 0,
        outputs: int = 0,
        duration_ms: float = 0.0,
    ) -> None:
        self._log.append(
            AssetsBundled(
                command=tuple(command),
                entrypoints=entrypoints,
                outputs=outputs,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )
        self._print(f"  [{duration_ms:.0f}ms] bundled {entrypoints} entrypoint(s) -> {outputs} file(s)")

    def record_asset(self, source: str, target: str, url_path: str) -> None:
        self._log.append(
            AssetReconciled(
                source=source,
                target=target,
                url_path=url_path,
                timestamp_ns=now_ns(),
            )
        )
        self._print(f"  asset {source} -> {url_path}")

    # ----- Content events -----

    def record_render(
        self,
        route: str,
        source: str,
        *,
        renderers: Sequence[str] = (),
        duration_ms: float = 0.0,
    ) -> None:
        self._log.append(
            ContentRendered(
                route=route,
                source=source,
                renderers=tuple(renderers),
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )
        chain = " -> ".join(renderers) or "verbatim"
        self._print(f"  [{duration_ms:.0f}ms] {route} ({chain})")

    def record_build(
        self,
        kind: str,
        source: str,
        target: str,
        *,
        duration_ms: float = 0.0,
    ) -> None:
        self._log.append(
            BuildEvent(
                kind=kind,  # type: ignore[arg-type]
                source=source,
                target=target,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )
        if kind == "skip_outside_root":
            self._print(f"  skipped {source}: {target} is outside the output root")
        elif kind == "skip_unchanged":
            self._print(f"  unchanged {target}")
        else:
            self._print(f"  wrote {target}")

    def record_compile(
        self,
        *,
        pages: int = 0,
        assets: int = 0,
        written: int = 0,
        duration_ms: float = 0.0,
    ) -> None:
        self._log.append(
            CompileFinished(
                pages=pages,
                assets=assets,
                written=written,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def _print(self, line: str) -> None:
        if self._verbose:
            print(line, file=sys.stderr)
