"""Unified event model for build-pass observability.

Defines event types for fragment registration, page builds, asset
emission, and host log output.

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
# Registration events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FragmentLoaded:
    """A fragment template was registered.

    Attributes:
        name: Name the fragment is registered under.
        source: Absolute path to the fragment file.
        replaced: True if an earlier fragment with the same name was overridden.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    name: str
    source: str
    replaced: bool
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Page build events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PageBuilt:
    """A page script was evaluated and rendered.

    Attributes:
        page: Page name (e.g. ``home`` or ``blog/post``).
        source: Absolute path to the page script.
        filename: Output asset name.
        duration_ms: Time from evaluation start to rendered HTML.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    page: str
    source: str
    filename: str
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class PageFailed:
    """A page produced no output.

    Attributes:
        page: Page name.
        source: Absolute path to the page script.
        stage: Step that failed.
        error: Rendered exception message.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    page: str
    source: str
    stage: Literal["read", "evaluate", "data", "render", "timeout"]
    error: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Output events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AssetEmitted:
    """An asset was committed to (or skipped by) the compilation.

    Attributes:
        filename: Asset name relative to the output directory.
        created: False when an existing asset with the same name was kept.
        size_bytes: Encoded size of the asset (0 when skipped).
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    filename: str
    created: bool
    size_bytes: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class LogEntry:
    """A line written through a host logger.

    Attributes:
        logger: Logger name (e.g. ``static-pages``).
        level: Severity.
        message: Log text.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    logger: str
    level: Literal["log", "warn", "error"]
    message: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type BuildEvent = FragmentLoaded | PageBuilt | PageFailed | AssetEmitted | LogEntry


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
