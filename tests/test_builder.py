"""Tests for pawprint.pages.builder — per-page evaluate, render, isolate."""

from __future__ import annotations

import asyncio
import time
from pathlib import Path

import pytest

from pawprint._errors import RenderError
from pawprint.fragments import FragmentRegistry
from pawprint.host.compilation import Logger
from pawprint.observability import BuildCollector, PageBuilt, PageFailed
from pawprint.pages import ConcurrencyLimiter, PageBuilder, PageFile, RenderedPage, page_name
from pawprint.sandbox import Evaluator
from tests.conftest import log_lines, write_page


@pytest.fixture
def registry() -> FragmentRegistry:
    registry = FragmentRegistry()
    registry.register("card", "<div>{{ title }}</div>")
    return registry


@pytest.fixture
def pages(tmp_path: Path) -> Path:
    path = tmp_path / "pages"
    path.mkdir()
    return path


def _builder(
    registry: FragmentRegistry,
    tmp_path: Path,
    logger: Logger,
    collector: BuildCollector,
    limiter: ConcurrencyLimiter | None = None,
) -> PageBuilder:
    return PageBuilder(
        registry,
        Evaluator(),
        tmp_path / "dist",
        limiter=limiter,
        logger=logger,
        collector=collector,
    )


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


class TestPageName:
    """page_name / PageFile — names follow the page's relative path."""

    @pytest.mark.parametrize(
        ("relative", "expected"),
        [
            ("home.py", "home"),
            ("blog/post.py", "blog/post"),
            ("docs/api/index.py", "docs/api/index"),
            ("feed.xml.py", "feed"),
        ],
    )
    def test_names(self, relative: str, expected: str) -> None:
        assert page_name(relative) == expected

    def test_page_file(self, pages: Path) -> None:
        path = write_page(pages, "blog/post.py", "x = 1\n")
        page = PageFile.from_path(path, pages)
        assert page.name == "blog/post"
        assert page.filename == "blog/post.html"
        assert page.path.is_absolute()
        assert not page.is_private

    def test_underscore_file_is_private(self, pages: Path) -> None:
        path = write_page(pages, "_helper.py", "x = 1\n")
        assert PageFile.from_path(path, pages).is_private


# ---------------------------------------------------------------------------
# build_one
# ---------------------------------------------------------------------------


class TestBuildOne:
    """PageBuilder.build_one — one page, errors propagate."""

    def test_renders_fragment(
        self, registry: FragmentRegistry, pages: Path, tmp_path: Path,
        logger: Logger, collector: BuildCollector,
    ) -> None:
        path = write_page(pages, "home.py", """
            def default():
                return {"component": "card", "title": "Hi"}
        """)
        builder = _builder(registry, tmp_path, logger, collector)
        rendered = builder.build_one(PageFile.from_path(path, pages))

        assert rendered.name == "home"
        assert rendered.filename == "home.html"
        assert rendered.absolute_filename == tmp_path / "dist" / "home.html"
        assert rendered.html == "<div>Hi</div>"
        assert rendered.source == path.resolve()
        (event,) = collector.log.query(event_type=PageBuilt)
        assert event.page == "home"

    def test_missing_component_key(
        self, registry: FragmentRegistry, pages: Path, tmp_path: Path,
        logger: Logger, collector: BuildCollector,
    ) -> None:
        path = write_page(pages, "bare.py", 'def default():\n    return {"title": "x"}\n')
        builder = _builder(registry, tmp_path, logger, collector)
        with pytest.raises(RenderError, match="'component'"):
            builder.build_one(PageFile.from_path(path, pages))

    def test_descriptor_must_be_mapping(
        self, registry: FragmentRegistry, pages: Path, tmp_path: Path,
        logger: Logger, collector: BuildCollector,
    ) -> None:
        path = write_page(pages, "list.py", "def default():\n    return ['card']\n")
        builder = _builder(registry, tmp_path, logger, collector)
        with pytest.raises(RenderError, match="mapping, got list"):
            builder.build_one(PageFile.from_path(path, pages))


# ---------------------------------------------------------------------------
# build — batches with per-page isolation
# ---------------------------------------------------------------------------


class TestBuild:
    """PageBuilder.build — order, isolation, limits."""

    @pytest.mark.asyncio
    async def test_results_follow_input_order(
        self, registry: FragmentRegistry, pages: Path, tmp_path: Path,
        logger: Logger, collector: BuildCollector,
    ) -> None:
        files = []
        for title in ("a", "b", "c"):
            path = write_page(pages, f"{title}.py", f"""
                def default():
                    return {{"component": "card", "title": "{title}"}}
            """)
            files.append(PageFile.from_path(path, pages))

        builder = _builder(registry, tmp_path, logger, collector)
        results = await builder.build(files)
        assert [r.html for r in results if r is not None] == [
            "<div>a</div>", "<div>b</div>", "<div>c</div>",
        ]

    @pytest.mark.asyncio
    async def test_private_pages_skipped_silently(
        self, registry: FragmentRegistry, pages: Path, tmp_path: Path,
        logger: Logger, collector: BuildCollector,
    ) -> None:
        path = write_page(pages, "_helper.py", 'raise RuntimeError("never run")\n')
        builder = _builder(registry, tmp_path, logger, collector)
        assert await builder.build([PageFile.from_path(path, pages)]) == []
        assert log_lines(collector) == []

    @pytest.mark.asyncio
    async def test_failure_isolated(
        self, registry: FragmentRegistry, pages: Path, tmp_path: Path,
        logger: Logger, collector: BuildCollector,
    ) -> None:
        good = write_page(pages, "good.py", """
            def default():
                return {"component": "card", "title": "ok"}
        """)
        bad = write_page(pages, "bad.py", 'raise ValueError("broken script")\n')
        builder = _builder(registry, tmp_path, logger, collector)

        results = await builder.build([
            PageFile.from_path(bad, pages), PageFile.from_path(good, pages),
        ])

        assert results[0] is None
        assert results[1] is not None
        errors = log_lines(collector, "error")
        assert len(errors) == 1
        assert "'bad'" in errors[0]
        assert "broken script" in errors[0]

    @pytest.mark.parametrize(
        ("source", "stage"),
        [
            ("x = 1\n", "evaluate"),
            ('def default():\n    raise KeyError("title")\n', "data"),
            ('def default():\n    return {"component": "ghost"}\n', "render"),
        ],
    )
    @pytest.mark.asyncio
    async def test_failure_stage_recorded(
        self, source: str, stage: str,
        registry: FragmentRegistry, pages: Path, tmp_path: Path,
        logger: Logger, collector: BuildCollector,
    ) -> None:
        path = write_page(pages, "page.py", source)
        builder = _builder(registry, tmp_path, logger, collector)
        assert await builder.build([PageFile.from_path(path, pages)]) == [None]
        (event,) = collector.log.query(event_type=PageFailed)
        assert event.stage == stage
        assert len(log_lines(collector, "error")) == 1

    @pytest.mark.asyncio
    async def test_unreadable_page(
        self, registry: FragmentRegistry, pages: Path, tmp_path: Path,
        logger: Logger, collector: BuildCollector,
    ) -> None:
        builder = _builder(registry, tmp_path, logger, collector)
        page = PageFile(path=pages / "gone.py", name="gone")
        assert await builder.build([page]) == [None]
        (event,) = collector.log.query(event_type=PageFailed)
        assert event.stage == "read"

    @pytest.mark.asyncio
    async def test_timeout_reported(
        self, registry: FragmentRegistry, pages: Path, tmp_path: Path,
        logger: Logger, collector: BuildCollector,
    ) -> None:
        path = write_page(pages, "slow.py", """
            import time
            def default():
                time.sleep(0.5)
                return {"component": "card", "title": "late"}
        """)
        limiter = ConcurrencyLimiter(2, timeout=0.05)
        builder = _builder(registry, tmp_path, logger, collector, limiter)

        assert await builder.build([PageFile.from_path(path, pages)]) == [None]
        (event,) = collector.log.query(event_type=PageFailed)
        assert event.stage == "timeout"
        assert "timed out after 0.05s" in log_lines(collector, "error")[0]

    @pytest.mark.asyncio
    async def test_concurrency_bounded(
        self, registry: FragmentRegistry, pages: Path, tmp_path: Path,
        logger: Logger, collector: BuildCollector,
    ) -> None:
        files = []
        for i in range(6):
            path = write_page(pages, f"p{i}.py", """
                import time
                def default():
                    time.sleep(0.05)
                    return {"component": "card", "title": "x"}
            """)
            files.append(PageFile.from_path(path, pages))
        limiter = ConcurrencyLimiter(2)
        builder = _builder(registry, tmp_path, logger, collector, limiter)

        results = await builder.build(files)
        assert all(r is not None for r in results)
        assert limiter.peak == 2

    @pytest.mark.asyncio
    async def test_empty_batch(
        self, registry: FragmentRegistry, tmp_path: Path,
        logger: Logger, collector: BuildCollector,
    ) -> None:
        builder = _builder(registry, tmp_path, logger, collector)
        assert await builder.build([]) == []

    def test_timed_out_page_does_not_hold_the_loop(
        self, registry: FragmentRegistry, pages: Path, tmp_path: Path,
        logger: Logger, collector: BuildCollector,
    ) -> None:
        path = write_page(pages, "hung.py", """
            import time
            def default():
                time.sleep(5)
                return {"component": "card", "title": "late"}
        """)
        limiter = ConcurrencyLimiter(1, timeout=0.2)

        async def run_pass() -> list[RenderedPage | None]:
            builder = _builder(registry, tmp_path, logger, collector, limiter)
            return await builder.build([PageFile.from_path(path, pages)])

        start = time.perf_counter()
        results = asyncio.run(run_pass())
        elapsed = time.perf_counter() - start

        assert results == [None]
        assert elapsed < 2.0
