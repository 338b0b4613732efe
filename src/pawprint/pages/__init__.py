"""Page discovery, building, and the concurrency cap."""

from pawprint.pages.builder import (
    COMPONENT_KEY,
    PageBuilder,
    PageFile,
    RenderedPage,
    page_name,
)
from pawprint.pages.limiter import ConcurrencyLimiter, to_daemon_thread

__all__ = [
    "COMPONENT_KEY",
    "ConcurrencyLimiter",
    "PageBuilder",
    "PageFile",
    "RenderedPage",
    "page_name",
    "to_daemon_thread",
]
