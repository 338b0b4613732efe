"""Compiler — runs build passes and writes their assets to disk.

Plugins call ``apply(compiler)`` and tap the lifecycle hooks:

    this_compilation  — sync, a new Compilation was created
    process_assets    — async, plugins add assets to the compilation
    after_compile     — sync, collect file/context dependencies
    stats_print       — sync, register formatters for asset info flags

``Compiler.run()`` is a coroutine returning ``Stats``; there is no
completion callback.  ``Compiler.watch()`` re-runs whenever one of the
previous pass's dependencies changes.
"""

from __future__ import annotations

import asyncio
import sys
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, TextIO

from pawprint._errors import BuildError
from pawprint.host.compilation import Compilation
from pawprint.observability.collector import BuildCollector
from pawprint.observability.events import now_ns

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pawprint.host.compilation import Asset


class Plugin(Protocol):
    def apply(self, compiler: Compiler) -> None: ...


class Hook:
    """A synchronous hook; taps run in registration order."""

    __slots__ = ("_taps",)

    def __init__(self) -> None:
        self._taps: list[tuple[str, Callable[..., Any]]] = []

    def tap(self, name: str, fn: Callable[..., Any]) -> None:
        self._taps.append((name, fn))

    @property
    def taps(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self._taps)

    def call(self, *args: Any) -> None:
        for _name, fn in self._taps:
            fn(*args)


class AsyncSeriesHook(Hook):
    """An asynchronous hook; each tap is awaited before the next starts."""

    __slots__ = ()

    def tap(self, name: str, fn: Callable[..., Awaitable[Any]]) -> None:  # type: ignore[override]
        super().tap(name, fn)

    async def call(self, *args: Any) -> None:  # type: ignore[override]
        for _name, fn in self._taps:
            await fn(*args)


@dataclass(slots=True)
class CompilerHooks:
    this_compilation: Hook = field(default_factory=Hook)
    process_assets: AsyncSeriesHook = field(default_factory=AsyncSeriesHook)
    after_compile: Hook = field(default_factory=Hook)
    stats_print: Hook = field(default_factory=Hook)


# Formats one asset-info value for the stats table, or returns None to omit it.
type InfoFormatter = Callable[[Any, "StatsColors"], str | None]


@dataclass(frozen=True, slots=True)
class StatsColors:
    """ANSI helpers handed to info formatters."""

    enabled: bool

    def green(self, text: str) -> str:
        return f"\033[32m{text}\033[0m" if self.enabled else text

    def dim(self, text: str) -> str:
        return f"\033[2m{text}\033[0m" if self.enabled else text

    def format_flag(self, flag: str) -> str:
        return f"[{flag}]"


class StatsPrinter:
    """Collects per-info-key formatters registered on ``stats_print``."""

    __slots__ = ("_formatters",)

    def __init__(self) -> None:
        self._formatters: dict[str, list[InfoFormatter]] = {}

    def for_info(self, key: str, formatter: InfoFormatter) -> None:
        self._formatters.setdefault(key, []).append(formatter)

    def format_asset(self, asset: Asset, colors: StatsColors) -> str:
        size = asset.source.size()
        flags: list[str] = []
        for key, formatters in self._formatters.items():
            if key not in asset.info:
                continue
            for formatter in formatters:
                rendered = formatter(asset.info[key], colors)
                if rendered:
                    flags.append(rendered)
        suffix = f" {' '.join(flags)}" if flags else ""
        return f"{asset.name}  {colors.dim(_format_size(size))}{suffix}"


@dataclass(frozen=True, slots=True)
class Stats:
    """Outcome of one build pass.

    Attributes:
        compilation: The finished compilation.
        written: Output files written (or rewritten) during this pass.
        duration_ms: Wall-clock time of the pass.
        started_ns: Monotonic timestamp the pass started at; events recorded
            during the pass are newer.
        printer: Info formatters registered on ``stats_print``.

    """

    compilation: Compilation
    written: tuple[Path, ...]
    duration_ms: float
    started_ns: int
    printer: StatsPrinter

    @property
    def assets(self) -> tuple[Asset, ...]:
        return tuple(self.compilation.assets.values())

    def to_string(self, *, colors: bool = False) -> str:
        palette = StatsColors(enabled=colors)
        lines = [f"  {self.printer.format_asset(a, palette)}" for a in self.assets]
        return "\n".join(lines)


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} bytes"
    return f"{size / 1024:.1f} KiB"


class Compiler:
    """Drives build passes for a set of plugins.

    Args:
        output_path: Directory emitted assets are written to.
        plugins: Plugins applied on construction.
        collector: Shared event collector (a fresh one is created if omitted).
        stream: Where compilation loggers echo output; ``None`` silences them.

    """

    def __init__(
        self,
        output_path: Path,
        plugins: Iterable[Plugin] = (),
        *,
        collector: BuildCollector | None = None,
        stream: TextIO | None = sys.stderr,
    ) -> None:
        self.output_path = output_path
        self.hooks = CompilerHooks()
        self.collector = collector if collector is not None else BuildCollector()
        self._stream = stream
        self._running = False
        for plugin in plugins:
            plugin.apply(self)

    async def run(self) -> Stats:
        """Run one build pass and write its assets.

        Raises:
            BuildError: If a pass is already running on this compiler or the
                output cannot be written.

        """
        if self._running:
            msg = "A build pass is already running on this compiler"
            raise BuildError(msg)
        self._running = True
        try:
            start = time.perf_counter()
            started_ns = now_ns()
            compilation = Compilation(self.collector, stream=self._stream)
            self.hooks.this_compilation.call(compilation)
            await self.hooks.process_assets.call(compilation)
            self.hooks.after_compile.call(compilation)
            written = self._emit(compilation)

            printer = StatsPrinter()
            self.hooks.stats_print.call(printer)
            elapsed = (time.perf_counter() - start) * 1000
            return Stats(
                compilation=compilation,
                written=written,
                duration_ms=elapsed,
                started_ns=started_ns,
                printer=printer,
            )
        finally:
            self._running = False

    async def watch(
        self,
        on_stats: Callable[[Stats], None] | None = None,
        *,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        """Run a pass, then re-run whenever a recorded dependency changes.

        Returns when *stop_event* is set.

        """
        from pawprint.host.watcher import DependencyWatcher

        while True:
            stats = await self.run()
            if on_stats is not None:
                on_stats(stats)
            watcher = DependencyWatcher(
                stats.compilation.file_dependencies,
                stats.compilation.context_dependencies,
            )
            changes = await watcher.wait_for_change(stop_event=stop_event)
            if not changes:
                return

    def _emit(self, compilation: Compilation) -> tuple[Path, ...]:
        """Write assets under the output path, skipping byte-identical files."""
        written: list[Path] = []
        for asset in compilation.assets.values():
            target = self.output_path / asset.name
            data = asset.source.buffer()
            try:
                if target.is_file() and target.read_bytes() == data:
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(data)
            except OSError as exc:
                msg = f"Failed to write {target}: {exc}"
                raise BuildError(msg) from exc
            written.append(target)
        return tuple(written)
