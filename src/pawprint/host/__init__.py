"""Build host — compilations, lifecycle hooks, output writing, and watch mode.

The pipeline in ``pawprint.plugin`` only talks to the host through the
interface here: an asset store with ``get_asset``/``emit_asset``, the
``file_dependencies`` set, named loggers, and the compiler hooks.
"""

from pawprint.host.compilation import Asset, Compilation, Logger, RawSource
from pawprint.host.compiler import Compiler, Stats, StatsColors, StatsPrinter

__all__ = [
    "Asset",
    "Compilation",
    "Compiler",
    "Logger",
    "RawSource",
    "Stats",
    "StatsColors",
    "StatsPrinter",
]
