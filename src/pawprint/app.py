"""Pawprint application — configuration, compiler, and plugin in one place.

The two public functions (build, watch) are the primary entry points.
"""

import asyncio
import sys
from pathlib import Path
from typing import TextIO

from pawprint.config import PawprintConfig
from pawprint.config_loader import load_config
from pawprint.host.compiler import Compiler, Stats
from pawprint.observability import BuildCollector, EventLog
from pawprint.plugin import StaticPagesPlugin


def create_compiler(
    config: PawprintConfig,
    *,
    collector: BuildCollector | None = None,
    stream: TextIO | None = sys.stderr,
) -> Compiler:
    """Create a Compiler with the static-pages plugin applied."""
    if collector is None:
        collector = BuildCollector(EventLog())
    return Compiler(
        config.output_path,
        [StaticPagesPlugin(config)],
        collector=collector,
        stream=stream,
    )


async def build_async(config: PawprintConfig, **kwargs: object) -> Stats:
    """Run a single build pass for *config* and return its stats."""
    compiler = create_compiler(config, **kwargs)  # type: ignore[arg-type]
    return await compiler.run()


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def build(root: str | Path = ".", **kwargs: object) -> Stats:
    """Build every page once and write it to the output directory.

    Args:
        root: Path to the project root.
        **kwargs: Override PawprintConfig fields (and ``concurrency`` /
            ``timeout`` options).

    """
    from pawprint.banner import print_banner, print_summary

    config = load_config(Path(root), **kwargs)
    print_banner(config, mode="build")

    stats = asyncio.run(build_async(config))
    print_summary(stats)
    return stats


def watch(root: str | Path = ".", **kwargs: object) -> None:
    """Build, then rebuild whenever a fragment or page file changes.

    Runs until interrupted.

    Args:
        root: Path to the project root.
        **kwargs: Override PawprintConfig fields.

    """
    from pawprint.banner import print_banner, print_summary

    config = load_config(Path(root), **kwargs)
    print_banner(config, mode="watch")

    compiler = create_compiler(config)
    try:
        asyncio.run(compiler.watch(print_summary))
    except KeyboardInterrupt:
        print("", file=sys.stderr)
