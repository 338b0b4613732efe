"""Shared test fixtures for pawprint."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from pawprint.host.compilation import Compilation, Logger
from pawprint.observability import BuildCollector, EventLog, LogEntry


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a minimal project: one fragment and one page.

    Returns the project root containing ``components/`` and ``pages/``.
    """
    components = tmp_path / "components"
    components.mkdir()
    (components / "card.html").write_text("<div>{{ title }}</div>")

    pages = tmp_path / "pages"
    pages.mkdir()
    write_page(pages, "home.py", """
        def default():
            return {"component": "card", "title": "Hi"}
    """)
    return tmp_path


@pytest.fixture
def collector() -> BuildCollector:
    return BuildCollector(EventLog())


@pytest.fixture
def compilation(collector: BuildCollector) -> Compilation:
    """A silent compilation (loggers record events but do not print)."""
    return Compilation(collector, stream=None)


@pytest.fixture
def logger(collector: BuildCollector) -> Logger:
    return Logger("test", collector)


def write_page(pages_dir: Path, name: str, source: str) -> Path:
    """Write a page script (dedented) and return its path."""
    path = pages_dir / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(source).lstrip("\n"))
    return path


def log_lines(collector: BuildCollector, level: str | None = None) -> list[str]:
    """Messages written through host loggers, oldest first."""
    entries = collector.log.since(0, LogEntry)
    return [e.message for e in entries if level is None or e.level == level]
