"""Build observability — one event model for every build pass.

Records:
- **Fragments**: registration (and last-wins overrides)
- **Pages**: successful renders and per-file failures
- **Output**: emitted and skipped assets
- **Host logs**: everything written through a compilation logger

All events are frozen dataclasses with nanosecond timestamps, safe for
concurrent production from page-build worker threads.

Quick Start:
    >>> from pawprint.observability import BuildCollector, EventLog, PageFailed
    >>> log = EventLog()
    >>> collector = BuildCollector(log)
    >>> # Pass collector to Compiler(...) and inspect after a run:
    >>> failures = log.query(event_type=PageFailed)

"""

from pawprint.observability.collector import BuildCollector
from pawprint.observability.events import (
    AssetEmitted,
    BuildEvent,
    FragmentLoaded,
    LogEntry,
    PageBuilt,
    PageFailed,
    now_ns,
)
from pawprint.observability.log import EventLog

__all__ = [
    "AssetEmitted",
    "BuildCollector",
    "BuildEvent",
    "EventLog",
    "FragmentLoaded",
    "LogEntry",
    "PageBuilt",
    "PageFailed",
    "now_ns",
]
