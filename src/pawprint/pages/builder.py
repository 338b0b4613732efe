"""Page builder — evaluate page scripts and render their fragments.

For every page file:

    1. evaluate the script to get its page-data function
    2. call it to get the page descriptor
    3. render the fragment named by ``descriptor["component"]`` with the
       whole descriptor as context
    4. produce ``<page name>.html``

Each page is processed in its own daemon thread under the concurrency limiter.
Any failure (unreadable file, bad script, raising data function, missing
fragment, render error, timeout) is logged and turns into ``None`` for
that page; the rest of the batch is unaffected.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from pawprint._errors import EvaluationError, RenderError, SourceReadError
from pawprint.pages.limiter import ConcurrencyLimiter, to_daemon_thread

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pawprint.fragments.registry import FragmentRegistry
    from pawprint.host.compilation import Logger
    from pawprint.observability.collector import BuildCollector
    from pawprint.sandbox.evaluator import Evaluator

# Descriptor key naming the fragment to render
COMPONENT_KEY = "component"


def page_name(relative: str | PurePosixPath) -> str:
    """Derive a page name from a path relative to the pages root.

    The base name is cut at its first ``.``:
    ``home.py`` -> ``home``; ``blog/post.py`` -> ``blog/post``.

    """
    path = PurePosixPath(relative)
    stem = path.name.split(".", 1)[0]
    parent = path.parent.as_posix()
    return stem if parent == "." else f"{parent}/{stem}"


@dataclass(frozen=True, slots=True)
class PageFile:
    """A page script discovered under the pages root.

    Attributes:
        path: Absolute path to the script.
        name: Page name (``blog/post`` for ``pages/blog/post.py``).

    """

    path: Path
    name: str

    @classmethod
    def from_path(cls, path: Path, pages_root: Path) -> PageFile:
        relative = path.resolve().relative_to(pages_root.resolve())
        return cls(path=path.resolve(), name=page_name(relative.as_posix()))

    @property
    def is_private(self) -> bool:
        """Underscore files are shared helpers, not pages."""
        return self.path.name.startswith("_")

    @property
    def filename(self) -> str:
        return f"{self.name}.html"


@dataclass(frozen=True, slots=True)
class RenderedPage:
    """HTML produced for one page.

    Attributes:
        name: Page name.
        filename: Asset name relative to the destination root.
        absolute_filename: Where the page lands on disk.
        html: Rendered document.
        source: Page script the HTML came from.

    """

    name: str
    filename: str
    absolute_filename: Path
    html: str
    source: Path


def _failure_stage(exc: BaseException) -> str:
    if isinstance(exc, TimeoutError):
        return "timeout"
    if isinstance(exc, SourceReadError):
        return "read"
    if isinstance(exc, EvaluationError):
        return "evaluate"
    if isinstance(exc, RenderError):
        return "render"
    return "data"


class PageBuilder:
    """Builds pages from scripts and the fragment registry of one pass.

    Args:
        registry: Fragments available to pages (fully populated).
        evaluator: Page-script evaluator.
        dest_root: Destination directory for ``absolute_filename``.
        limiter: Caps concurrent builds (default limit 100, no timeout).
        logger: Host logger for failures.
        collector: Records page events.

    """

    def __init__(
        self,
        registry: FragmentRegistry,
        evaluator: Evaluator,
        dest_root: Path,
        *,
        limiter: ConcurrencyLimiter | None = None,
        logger: Logger | None = None,
        collector: BuildCollector | None = None,
    ) -> None:
        self._registry = registry
        self._evaluator = evaluator
        self._dest_root = dest_root
        self._limiter = limiter if limiter is not None else ConcurrencyLimiter()
        self._logger = logger
        self._collector = collector

    @property
    def limiter(self) -> ConcurrencyLimiter:
        return self._limiter

    async def build(self, page_files: Iterable[PageFile]) -> list[RenderedPage | None]:
        """Build every non-private page; results follow input order."""
        pages = [page for page in page_files if not page.is_private]
        if not pages:
            return []
        return list(await asyncio.gather(*(self._build_isolated(page) for page in pages)))

    async def _build_isolated(self, page: PageFile) -> RenderedPage | None:
        try:
            return await self._limiter.run(to_daemon_thread, self.build_one, page)
        except Exception as exc:
            self._report_failure(page, exc)
            return None

    def build_one(self, page: PageFile) -> RenderedPage:
        """Evaluate and render a single page synchronously.

        Raises:
            SourceReadError: If the script cannot be read.
            EvaluationError: If the script yields no usable function.
            RenderError: If the descriptor is malformed or rendering fails.
            Exception: Anything raised by the page-data function itself.

        """
        t0 = time.perf_counter()
        fn = self._evaluator.evaluate(page.path)
        descriptor = fn()

        if not isinstance(descriptor, Mapping):
            msg = f"Page data must be a mapping, got {type(descriptor).__name__}"
            raise RenderError(msg)
        component = descriptor.get(COMPONENT_KEY)
        if not isinstance(component, str) or not component:
            msg = f"Page data has no {COMPONENT_KEY!r} naming a component"
            raise RenderError(msg)

        html = self._registry.render(component, descriptor)
        rendered = RenderedPage(
            name=page.name,
            filename=page.filename,
            absolute_filename=self._dest_root / page.filename,
            html=html,
            source=page.path,
        )

        if self._collector is not None:
            self._collector.record_page_built(
                page.name,
                str(page.path),
                page.filename,
                duration_ms=(time.perf_counter() - t0) * 1000,
            )
        return rendered

    def _report_failure(self, page: PageFile, exc: Exception) -> None:
        stage = _failure_stage(exc)
        if stage == "timeout":
            detail = f"timed out after {self._limiter.timeout}s"
        elif stage == "data":
            detail = f"{type(exc).__name__}: {exc}"
        else:
            detail = str(exc) or type(exc).__name__
        if self._collector is not None:
            self._collector.record_page_failed(page.name, str(page.path), stage, detail)
        if self._logger is not None:
            self._logger.error(
                f"Page {page.name!r} ({page.path}) failed to {_VERBS[stage]}: {detail}"
            )


_VERBS: dict[str, str] = {
    "read": "read",
    "evaluate": "evaluate",
    "data": "produce data",
    "render": "render",
    "timeout": "finish",
}
