"""Event log — the build history shared by every pass of a compiler.

Page builds record from worker threads, so every access goes through one
lock.  The log is bounded; a long watch session drops its oldest passes
first.

Two read paths:

    query()     newest-first filtered lookup (by type, path, start time)
    since()     everything one pass recorded, oldest first, for summaries
"""

import threading
from collections import deque

from pawprint.observability.events import BuildEvent


def _event_path(event: BuildEvent) -> str:
    return getattr(event, "source", None) or getattr(event, "filename", None) or ""


class EventLog:
    """Bounded, lock-protected store of build events.

    Args:
        max_events: Events retained before the oldest are dropped.

    """

    __slots__ = ("_events", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._events: deque[BuildEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: BuildEvent) -> None:
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        since_ns: int = 0,
        path: str | None = None,
        limit: int = 100,
    ) -> list[BuildEvent]:
        """Return up to *limit* matching events, most recent first.

        *path* matches as a substring of the event's source file, or of its
        output filename for events without a source.

        """
        with self._lock:
            snapshot = list(self._events)

        results: list[BuildEvent] = []
        for event in reversed(snapshot):
            if len(results) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if event.timestamp_ns < since_ns:
                continue
            if path is not None and path not in _event_path(event):
                continue
            results.append(event)
        return results

    def since(self, started_ns: int, event_type: type | None = None) -> list[BuildEvent]:
        """Events recorded at or after *started_ns*, oldest first, unbounded.

        Used with ``Stats.started_ns`` to read back what a single pass did.

        """
        with self._lock:
            return [
                event
                for event in self._events
                if event.timestamp_ns >= started_ns
                and (event_type is None or isinstance(event, event_type))
            ]
