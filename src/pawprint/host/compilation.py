"""Compilation — the per-pass asset store, dependency sets, and loggers.

A fresh Compilation is created by the Compiler for every build pass.
Plugins read and emit assets through it, add the files the pass depends
on, and log through named loggers whose output lands in the shared
event log.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

from pawprint._errors import BuildError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pawprint._types import AssetName
    from pawprint.observability.collector import BuildCollector


class RawSource:
    """Asset content held in memory as text."""

    __slots__ = ("_text",)

    def __init__(self, text: str) -> None:
        self._text = text

    def source(self) -> str:
        return self._text

    def buffer(self) -> bytes:
        return self._text.encode("utf-8")

    def size(self) -> int:
        return len(self.buffer())

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RawSource) and other._text == self._text

    def __hash__(self) -> int:
        return hash(self._text)

    def __repr__(self) -> str:
        return f"RawSource({self.size()} bytes)"


@dataclass(frozen=True, slots=True)
class Asset:
    """An output file registered in a compilation.

    Attributes:
        name: Path relative to the output directory (POSIX separators).
        source: The asset content.
        info: Free-form metadata; ``created`` marks pages emitted by this pass.

    """

    name: AssetName
    source: RawSource
    info: dict[str, Any] = field(default_factory=dict)


class Logger:
    """Named logger writing to stderr and the build event log."""

    __slots__ = ("_collector", "_name", "_stream")

    def __init__(
        self,
        name: str,
        collector: BuildCollector,
        stream: TextIO | None = None,
    ) -> None:
        self._name = name
        self._collector = collector
        self._stream = stream

    @property
    def name(self) -> str:
        return self._name

    def log(self, message: str) -> None:
        self._write("log", message)

    def warn(self, message: str) -> None:
        self._write("warn", message)

    def error(self, error: BaseException | str) -> None:
        """Log an error; exceptions are rendered with their type name."""
        if isinstance(error, BaseException):
            message = f"{type(error).__name__}: {error}"
        else:
            message = error
        self._write("error", message)

    def _write(self, level: str, message: str) -> None:
        self._collector.record_log(self._name, level, message)
        if self._stream is None:
            return
        prefix = {"log": " ", "warn": "!", "error": "✗"}[level]
        print(f"  {prefix} [{self._name}] {message}", file=self._stream)


class Compilation:
    """Asset store and dependency sets for one build pass.

    Args:
        collector: Receives log lines and asset events.
        stream: Where loggers echo their output (``None`` silences them).

    """

    def __init__(
        self,
        collector: BuildCollector,
        *,
        stream: TextIO | None = sys.stderr,
    ) -> None:
        self._collector = collector
        self._stream = stream
        self._assets: dict[AssetName, Asset] = {}
        self._loggers: dict[str, Logger] = {}
        self.file_dependencies: set[Path] = set()
        self.context_dependencies: set[Path] = set()

    @property
    def collector(self) -> BuildCollector:
        return self._collector

    @property
    def assets(self) -> Mapping[AssetName, Asset]:
        """Assets emitted so far, keyed by name in emission order."""
        return self._assets

    def get_asset(self, name: AssetName) -> Asset | None:
        return self._assets.get(name)

    def emit_asset(
        self,
        name: AssetName,
        source: RawSource,
        info: Mapping[str, Any] | None = None,
    ) -> Asset:
        """Register a new asset.

        Raises:
            BuildError: If an asset with this name was already emitted.

        """
        if name in self._assets:
            msg = f"Conflict: multiple assets emit to the same filename {name!r}"
            raise BuildError(msg)
        asset = Asset(name=name, source=source, info=dict(info or {}))
        self._assets[name] = asset
        self._collector.record_asset(
            name, created=bool(asset.info.get("created")), size_bytes=source.size(),
        )
        return asset

    def get_logger(self, name: str) -> Logger:
        logger = self._loggers.get(name)
        if logger is None:
            logger = Logger(name, self._collector, self._stream)
            self._loggers[name] = logger
        return logger
