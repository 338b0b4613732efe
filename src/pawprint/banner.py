"""Startup banner and build summary — mode-aware status output.

Detects ``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

from pawprint.observability.events import PageFailed

if TYPE_CHECKING:
    from pawprint.config import PawprintConfig
    from pawprint.host.compiler import Stats


# ---------------------------------------------------------------------------
# ANSI helpers — respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_RED = "\033[31m" if _COLOR else ""
_ORANGE = "\033[38;5;214m" if _COLOR else ""

_MODE_STYLES: dict[str, tuple[str, str]] = {
    "build": (_YELLOW, "build"),
    "watch": (_GREEN, "watch"),
}


def _mode_badge(mode: str) -> str:
    color, label = _MODE_STYLES.get(mode, (_DIM, mode))
    return f"{color}[{label}]{_RESET}"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def print_banner(config: PawprintConfig, mode: str) -> None:
    """Print the startup banner to stderr."""
    from pawprint import __version__

    header = f"  {_ORANGE}{_BOLD}🐾{_RESET}  Pawprint {_DIM}v{__version__}{_RESET}  {_mode_badge(mode)}"
    options = config.options
    timeout = f"{options.timeout:g}s" if options.timeout is not None else "none"
    lines = [
        "",
        header,
        f"  {_DIM}{'─' * 43}{_RESET}",
        f"  {_DIM}├─{_RESET} components: {_DIM}{config.components_path}{_RESET}",
        f"  {_DIM}├─{_RESET} pages: {_DIM}{config.pages_path}{_RESET}",
        f"  {_DIM}├─{_RESET} concurrency: {options.concurrency}, timeout: {timeout}",
        f"  {_DIM}└─{_RESET} output: {_DIM}{config.output_path}{_RESET}",
        "",
    ]
    if mode == "watch":
        lines.append(f"  {_DIM}Watching for changes...{_RESET}")
        lines.append("")
    print("\n".join(lines), file=sys.stderr)


def print_summary(stats: Stats) -> None:
    """Print the asset table and pass totals to stderr."""
    compilation = stats.compilation
    failures = compilation.collector.log.since(stats.started_ns, PageFailed)

    lines = [""]
    table = stats.to_string(colors=_COLOR)
    if table:
        lines.append(table)
        lines.append("")
    lines.append(f"  {_DIM}{'─' * 41}{_RESET}")
    lines.append(f"  Emitted {_plural(len(stats.assets), 'page')}")
    if failures:
        lines.append(f"  {_RED}{_plural(len(failures), 'page')} failed{_RESET}")
    lines.append(f"  Wrote {_plural(len(stats.written), 'file')}")
    lines.append(f"  Done in {stats.duration_ms:.0f}ms")
    print("\n".join(lines), file=sys.stderr)
