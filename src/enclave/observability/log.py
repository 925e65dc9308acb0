"""Event log — bounded, thread-safe store of compile events.

Keeps the most recent ``CompileEvent`` objects of one or more compiles in a
ring buffer.  Events can be filtered by type and by a substring of any of
their path-like fields (source, target, route, URL path).

Thread Safety:
    All methods are protected by a ``threading.Lock``.

"""

import threading
from collections import Counter, deque
from typing import Any

from enclave.observability.events import CompileEvent

# Event attributes searched by ``EventLog.query(path=...)``
_PATH_FIELDS = ("source", "target", "route", "url_path")


def _mentions(event: CompileEvent, fragment: str) -> bool:
    return any(fragment in str(getattr(event, name, "")) for name in _PATH_FIELDS)


class EventLog:
    """Ring buffer of compile events; the oldest are dropped when full.

    Args:
        max_events: Capacity of the buffer.

    """

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 10_000) -> None:
        self._max_events = max_events
        self._events: deque[CompileEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: CompileEvent) -> None:
        with self._lock:
            self._events.append(event)

    def _snapshot(self) -> list[CompileEvent]:
        with self._lock:
            return list(self._events)

    def query(
        self,
        *,
        event_type: type | None = None,
        path: str | None = None,
        limit: int = 100,
    ) -> list[CompileEvent]:
        """Return up to *limit* matching events, newest first.

        Args:
            event_type: Keep only instances of this event class.
            path: Keep only events whose source, target, route or URL path
                contains this substring.
            limit: Maximum number of events returned.

        """
        matches = (
            event for event in reversed(self._snapshot())
            if (event_type is None or isinstance(event, event_type))
            and (path is None or _mentions(event, path))
        )
        return [event for _, event in zip(range(limit), matches)]

    def recent(self, n: int = 20) -> list[CompileEvent]:
        """The *n* newest events, oldest first."""
        return self._snapshot()[-n:]

    def clear(self) -> int:
        """Drop every event; returns how many there were."""
        with self._lock:
            dropped = len(self._events)
            self._events.clear()
        return dropped

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Event totals, overall and per event class."""
        counts = Counter(type(event).__name__ for event in self._snapshot())
        return {
            "total": counts.total(),
            "max_events": self._max_events,
            "by_type": dict(counts),
        }
