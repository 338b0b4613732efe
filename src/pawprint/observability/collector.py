"""Build collector — records build-pass events into an event log.

One collector is shared by the fragment registry, the page builder, the
output deduplicator, and the host loggers of a compiler, so a single
``EventLog`` holds the whole history of a build (or of a watch session).

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.
    Safe to call from page-build worker threads.

"""

from __future__ import annotations

from pawprint.observability.events import (
    AssetEmitted,
    FragmentLoaded,
    LogEntry,
    PageBuilt,
    PageFailed,
    now_ns,
)
from pawprint.observability.log import EventLog


class BuildCollector:
    """Unified event collector for build passes.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_fragment(self, name: str, source: str, *, replaced: bool = False) -> None:
        """Record a fragment registration."""
        self._log.append(
            FragmentLoaded(name=name, source=source, replaced=replaced, timestamp_ns=now_ns())
        )

    def record_page_built(
        self,
        page: str,
        source: str,
        filename: str,
        *,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a successfully rendered page."""
        self._log.append(
            PageBuilt(
                page=page,
                source=source,
                filename=filename,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_page_failed(self, page: str, source: str, stage: str, error: str) -> None:
        """Record a page that produced no output."""
        self._log.append(
            PageFailed(
                page=page,
                source=source,
                stage=stage,  # type: ignore[arg-type]
                error=error,
                timestamp_ns=now_ns(),
            )
        )

    def record_asset(self, filename: str, *, created: bool, size_bytes: int = 0) -> None:
        """Record an emitted or skipped asset."""
        self._log.append(
            AssetEmitted(
                filename=filename,
                created=created,
                size_bytes=size_bytes,
                timestamp_ns=now_ns(),
            )
        )

    def record_log(self, logger: str, level: str, message: str) -> None:
        """Record a host logger line."""
        self._log.append(
            LogEntry(
                logger=logger,
                level=level,  # type: ignore[arg-type]
                message=message,
                timestamp_ns=now_ns(),
            )
        )
