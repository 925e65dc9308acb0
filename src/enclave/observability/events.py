"""Event model for compile observability.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Asset events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AssetsBundled:
    """The external bundler ran and its report was parsed.

    Attributes:
        command: Full command line that was executed.
        entrypoints: Number of entrypoint assets passed to the bundler.
        outputs: Number of output files named in the report.
        duration_ms: Time spent in the bundler subprocess and parsing.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    command: tuple[str, ...]
    entrypoints: int
    outputs: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class AssetReconciled:
    """A tracked asset was matched to a bundler output file.

    Attributes:
        source: Absolute input path of the asset.
        target: Absolute path of the bundler output file.
        url_path: URL path assigned to the asset.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    source: str
    target: str
    url_path: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Content events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ContentRendered:
    """A routed content blob was rendered (with its layout, if any).

    Attributes:
        route: Normalized route of the content.
        source: Absolute input path.
        renderers: Renderer class names, in application order.
        duration_ms: Render time in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    route: str
    source: str
    renderers: tuple[str, ...]
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class BuildEvent:
    """An output-file decision was made.

    Attributes:
        kind: ``write`` when the file was written, otherwise why it was skipped.
        source: Source file path (or route).
        target: Output file path.
        duration_ms: Time taken in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    kind: Literal["write", "skip_unchanged", "skip_outside_root"]
    source: str
    target: str
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class CompileFinished:
    """A full compile completed.

    Attributes:
        pages: Number of routed contents processed.
        assets: Number of tracked assets reconciled with bundler output.
        written: Number of files actually written.
        duration_ms: Wall-clock time of the whole compile.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    pages: int
    assets: int
    written: int
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type CompileEvent = (
    AssetsBundled
    | AssetReconciled
    | ContentRendered
    | BuildEvent
    | CompileFinished
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
