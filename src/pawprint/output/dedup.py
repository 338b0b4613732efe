"""Output deduplicator — commit rendered pages without overwriting.

A page whose filename already exists in the compilation (emitted by an
earlier page of the same pass, or by another plugin) is skipped silently:
the existing asset wins.  New pages are emitted with ``created=True`` so
the stats output can mark them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pawprint.host.compilation import RawSource

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pawprint.host.compilation import Compilation, Logger
    from pawprint.pages.builder import RenderedPage

# Asset-info key marking pages emitted by this plugin
CREATED_FLAG = "created"


class OutputDeduplicator:
    """Emits rendered pages into a compilation, first one wins.

    Args:
        compilation: Target compilation.
        logger: Optional logger for skipped duplicates.

    """

    def __init__(self, compilation: Compilation, logger: Logger | None = None) -> None:
        self._compilation = compilation
        self._logger = logger

    def commit(self, rendered_pages: Iterable[RenderedPage | None]) -> list[str]:
        """Emit every new page and return the emitted filenames."""
        emitted: list[str] = []
        for page in rendered_pages:
            if page is None:
                continue
            if self._compilation.get_asset(page.filename) is not None:
                if self._logger is not None:
                    self._logger.log(f"Keeping existing asset {page.filename}")
                self._compilation.collector.record_asset(page.filename, created=False)
                continue
            self._compilation.emit_asset(
                page.filename,
                RawSource(page.html),
                {CREATED_FLAG: True, "source": str(page.source)},
            )
            emitted.append(page.filename)
        return emitted
