"""StaticPagesPlugin — the build step wiring fragments, pages, and output.

Per compilation pass:

    process_assets   register fragments -> build pages (bounded) -> commit
    after_compile    record every fragment and page file as a dependency
    stats_print      mark pages emitted by this pass as ``[created]``

Fragment registration finishes before the first page starts building, so
page builds only ever read the registry.  Each pass gets its own registry
and module resolver; nothing carries over to the next pass.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pawprint.discovery import discover
from pawprint.fragments.registry import FragmentRegistry
from pawprint.output.dedup import CREATED_FLAG, OutputDeduplicator
from pawprint.output.dependencies import DependencyTracker
from pawprint.pages.builder import PageBuilder, PageFile
from pawprint.pages.limiter import ConcurrencyLimiter
from pawprint.sandbox.evaluator import Evaluator
from pawprint.sandbox.resolver import ModuleResolver, rewrite_relative

if TYPE_CHECKING:
    from pawprint._types import RewriteFunc
    from pawprint.config import PawprintConfig
    from pawprint.host.compilation import Compilation
    from pawprint.host.compiler import Compiler, StatsColors, StatsPrinter
    from pawprint.pages.builder import RenderedPage

PLUGIN_NAME = "StaticPagesPlugin"
LOGGER_NAME = "static-pages"


class StaticPagesPlugin:
    """Generates one HTML page per page script.

    Args:
        config: Validated configuration (roots, options, globs).
        rewrite: Specifier rewrite strategy for ``require``.

    """

    def __init__(
        self,
        config: PawprintConfig,
        *,
        rewrite: RewriteFunc = rewrite_relative,
    ) -> None:
        self.config = config
        self._rewrite = rewrite
        self._limiter: ConcurrencyLimiter | None = None

    @property
    def limiter(self) -> ConcurrencyLimiter:
        """The page-build limiter shared by every pass of this plugin."""
        if self._limiter is None:
            options = self.config.options
            self._limiter = ConcurrencyLimiter(options.concurrency, timeout=options.timeout)
        return self._limiter

    def apply(self, compiler: Compiler) -> None:
        compiler.hooks.process_assets.tap(PLUGIN_NAME, self.process_assets)
        compiler.hooks.after_compile.tap(PLUGIN_NAME, self.record_dependencies)
        compiler.hooks.stats_print.tap(PLUGIN_NAME, self._tap_stats)

    async def process_assets(self, compilation: Compilation) -> list[RenderedPage | None]:
        """Build all pages of the pass and commit them to *compilation*."""
        config = self.config
        logger = compilation.get_logger(LOGGER_NAME)
        logger.log("Starting creating static pages...")

        registry = FragmentRegistry(logger=logger, collector=compilation.collector)
        registry.register_all(config.components_path, config.fragment_glob)
        # Build the template environment before worker threads read it
        _ = registry.environment

        builder = PageBuilder(
            registry,
            Evaluator(ModuleResolver(self._rewrite)),
            config.output_path,
            limiter=self.limiter,
            logger=logger,
            collector=compilation.collector,
        )
        pages_root = config.pages_path
        page_files = [
            PageFile.from_path(path, pages_root)
            for path in discover(pages_root, config.page_glob)
        ]
        rendered = await builder.build(page_files)

        emitted = OutputDeduplicator(compilation, logger).commit(rendered)
        logger.log(f"Finished creating pages ({len(emitted)} created)")
        return rendered

    def record_dependencies(self, compilation: Compilation) -> None:
        """Add every fragment and page file to the compilation's inputs."""
        tracker = DependencyTracker(
            compilation,
            fragment_glob=self.config.fragment_glob,
            page_glob=self.config.page_glob,
        )
        tracker.record(self.config.components_path, self.config.pages_path)

    def _tap_stats(self, printer: StatsPrinter) -> None:
        printer.for_info(CREATED_FLAG, _format_created)


def _format_created(created: object, colors: StatsColors) -> str | None:
    return colors.green(colors.format_flag("created")) if created else None
