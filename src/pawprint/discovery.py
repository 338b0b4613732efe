"""File discovery under the components and pages roots."""

from pathlib import Path


def discover(root: Path, pattern: str) -> tuple[Path, ...]:
    """Return absolute files under *root* matching *pattern*, sorted.

    Matching is recursive (``Path.rglob``).  ``__pycache__`` contents are
    skipped.  A missing root yields an empty tuple.

    """
    if not root.is_dir():
        return ()
    root = root.resolve()
    return tuple(
        path
        for path in sorted(root.rglob(pattern))
        if path.is_file() and "__pycache__" not in path.relative_to(root).parts
    )
