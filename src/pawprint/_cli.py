"""Pawprint CLI — pawprint build / pawprint watch.

Entry point for the ``pawprint`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys

from pawprint._errors import PawprintError


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("root", nargs="?", default=".", help="Project root directory")
    parser.add_argument("--components", dest="components_dir", help="Fragment templates directory")
    parser.add_argument("--pages", dest="pages_dir", help="Page scripts directory")
    parser.add_argument("--output", dest="dest_dir", help="Output directory")
    parser.add_argument("--concurrency", type=int, help="Maximum page builds in flight")
    parser.add_argument("--timeout", type=float, help="Seconds allowed per page build")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the pawprint CLI."""
    parser = argparse.ArgumentParser(
        prog="pawprint",
        description="Static HTML pages from fragments and page scripts.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    build_parser = subparsers.add_parser("build", help="Build all pages once")
    _add_common_arguments(build_parser)

    watch_parser = subparsers.add_parser(
        "watch",
        help="Build, then rebuild when fragments or pages change",
    )
    _add_common_arguments(watch_parser)

    return parser


def _get_version() -> str:
    """Get the package version."""
    from pawprint import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from pawprint.app import build, watch

    overrides = {
        "components_dir": args.components_dir,
        "pages_dir": args.pages_dir,
        "dest_dir": args.dest_dir,
        "concurrency": args.concurrency,
        "timeout": args.timeout,
    }
    try:
        if args.command == "build":
            build(args.root, **overrides)
        elif args.command == "watch":
            watch(args.root, **overrides)
    except PawprintError as exc:
        print(f"pawprint: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
