"""Tests for pawprint.fragments — naming, registration, and rendering."""

from __future__ import annotations

from pathlib import Path

import pytest

from pawprint._errors import RenderError
from pawprint.fragments import FragmentRegistry, fragment_name
from pawprint.host.compilation import Logger
from pawprint.observability import BuildCollector, FragmentLoaded
from tests.conftest import log_lines


@pytest.fixture
def registry(logger: Logger, collector: BuildCollector) -> FragmentRegistry:
    return FragmentRegistry(logger=logger, collector=collector)


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


class TestFragmentName:
    """fragment_name — first path segment, suffix stripped for plain files."""

    @pytest.mark.parametrize(
        ("relative", "expected"),
        [
            ("card.html", "card"),
            ("card/index.html", "card"),
            ("nav/item/link.html", "nav"),
            ("hero.partial.html", "hero"),
        ],
    )
    def test_names(self, relative: str, expected: str) -> None:
        assert fragment_name(relative) == expected

    def test_empty_path_rejected(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            fragment_name("")


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


class TestRegister:
    """FragmentRegistry.register / register_all."""

    def test_register_and_lookup(self, registry: FragmentRegistry) -> None:
        registry.register("card", "<div></div>")
        assert "card" in registry
        assert len(registry) == 1
        assert registry.get("card").content == "<div></div>"  # type: ignore[union-attr]
        assert registry.get("missing") is None

    def test_register_logs_and_records(
        self, registry: FragmentRegistry, collector: BuildCollector,
    ) -> None:
        registry.register("card", "x")
        assert log_lines(collector) == ["Loaded component: card"]
        (event,) = collector.log.query(event_type=FragmentLoaded)
        assert event.replaced is False

    def test_last_registration_wins(
        self, registry: FragmentRegistry, collector: BuildCollector,
    ) -> None:
        registry.register("card", "first")
        registry.register("card", "second", source=Path("/c/card/index.html"))
        assert registry.get("card").content == "second"  # type: ignore[union-attr]
        assert len(log_lines(collector, "warn")) == 1

    def test_register_all(self, registry: FragmentRegistry, tmp_path: Path) -> None:
        (tmp_path / "card.html").write_text("<div>{{ title }}</div>")
        (tmp_path / "nav").mkdir()
        (tmp_path / "nav" / "index.html").write_text("<nav></nav>")
        (tmp_path / "notes.txt").write_text("ignored")

        assert registry.register_all(tmp_path) == 2
        assert registry.list_templates() == ["card", "nav"]
        assert set(registry.sources) == {
            (tmp_path / "card.html").resolve(),
            (tmp_path / "nav" / "index.html").resolve(),
        }

    def test_register_all_custom_pattern(
        self, registry: FragmentRegistry, tmp_path: Path,
    ) -> None:
        (tmp_path / "card.hbs").write_text("x")
        (tmp_path / "card.html").write_text("y")
        assert registry.register_all(tmp_path, "*.hbs") == 1
        assert registry.get("card").content == "x"  # type: ignore[union-attr]

    def test_register_all_skips_empty_files(
        self, registry: FragmentRegistry, collector: BuildCollector, tmp_path: Path,
    ) -> None:
        (tmp_path / "blank.html").write_text("")
        assert registry.register_all(tmp_path) == 0
        assert "blank" not in registry
        assert len(log_lines(collector, "warn")) == 1

    def test_register_all_missing_root(self, registry: FragmentRegistry, tmp_path: Path) -> None:
        assert registry.register_all(tmp_path / "nope") == 0
        assert len(registry) == 0

    def test_register_all_logs_undecodable_file(
        self, registry: FragmentRegistry, collector: BuildCollector, tmp_path: Path,
    ) -> None:
        (tmp_path / "bad.html").write_bytes(b"\xff\xfe\x00bad")
        (tmp_path / "good.html").write_text("ok")
        assert registry.register_all(tmp_path) == 1
        assert "good" in registry
        errors = log_lines(collector, "error")
        assert len(errors) == 1
        assert "bad.html" in errors[0]


# ---------------------------------------------------------------------------
# Loader protocol and rendering
# ---------------------------------------------------------------------------


class TestRender:
    """FragmentRegistry as a kida loader."""

    def test_get_source(self, registry: FragmentRegistry) -> None:
        registry.register("card", "<b></b>", source=Path("/c/card.html"))
        assert registry.get_source("card") == ("<b></b>", "/c/card.html")

    def test_get_source_unknown(self, registry: FragmentRegistry) -> None:
        with pytest.raises(RenderError, match="Unknown component"):
            registry.get_source("missing")

    def test_render_with_data(self, registry: FragmentRegistry) -> None:
        registry.register("card", "<div>{{ title }}</div>")
        assert registry.render("card", {"title": "Hi"}) == "<div>Hi</div>"

    def test_render_escapes_by_default(self, registry: FragmentRegistry) -> None:
        registry.register("card", "<p>{{ body }}</p>")
        html = registry.render("card", {"body": "<script>"})
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_render_without_autoescape(self) -> None:
        registry = FragmentRegistry(autoescape=False)
        registry.register("raw", "{{ body }}")
        assert registry.render("raw", {"body": "<em>x</em>"}) == "<em>x</em>"

    def test_render_include(self, registry: FragmentRegistry) -> None:
        registry.register("title", "<h1>{{ title }}</h1>")
        registry.register("page", '<main>{% include "title" %}</main>')
        assert registry.render("page", {"title": "Hello"}) == "<main><h1>Hello</h1></main>"

    def test_render_unknown_lists_known(self, registry: FragmentRegistry) -> None:
        registry.register("card", "x")
        with pytest.raises(RenderError, match=r"'ghost' \(known: card\)"):
            registry.render("ghost", {})

    def test_rerender_after_override(self, registry: FragmentRegistry) -> None:
        registry.register("card", "one")
        assert registry.render("card", {}) == "one"
        registry.register("card", "two")
        assert registry.render("card", {}) == "two"

    def test_render_error_wrapped(self, registry: FragmentRegistry) -> None:
        registry.register("broken", "{% if %}")
        with pytest.raises(RenderError, match="broken"):
            registry.render("broken", {})
