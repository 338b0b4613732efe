"""Dependency watcher — decides when a finished pass has gone stale.

After a pass, the compilation knows every file it read
(``file_dependencies``) and every directory whose contents it scanned
(``context_dependencies``).  The watcher waits until one of those files
changes, or a file is added to or removed from one of those directories.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from watchfiles import Change, awatch

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Iterable


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A relevant file change detected by the watcher.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.
        category: ``file`` for a recorded dependency, ``context`` for a
            file appearing or vanishing inside a watched directory.

    """

    path: Path
    kind: Literal["created", "modified", "deleted"]
    category: Literal["file", "context"]


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, Literal["created", "modified", "deleted"]] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def categorize_change(
    path: Path,
    files: frozenset[Path],
    contexts: frozenset[Path],
) -> Literal["file", "context"] | None:
    """Return how *path* relates to the recorded dependencies, or None."""
    if path in files:
        return "file"
    for directory in contexts:
        if path.is_relative_to(directory):
            if "__pycache__" in path.relative_to(directory).parts:
                return None
            return "context"
    return None


class DependencyWatcher:
    """Waits for a change to recorded file or context dependencies.

    Args:
        files: Absolute file paths the pass read.
        contexts: Absolute directories the pass scanned.

    """

    def __init__(self, files: Iterable[Path], contexts: Iterable[Path] = ()) -> None:
        self._files = frozenset(Path(p).resolve() for p in files)
        self._contexts = frozenset(Path(p).resolve() for p in contexts)

    @property
    def watch_paths(self) -> tuple[Path, ...]:
        """Existing directories to hand to watchfiles, without nesting."""
        candidates = {p for p in self._contexts if p.is_dir()}
        candidates.update(p.parent for p in self._files if p.parent.is_dir())
        roots = sorted(candidates, key=lambda p: len(p.parts))
        selected: list[Path] = []
        for path in roots:
            if not any(path.is_relative_to(parent) for parent in selected):
                selected.append(path)
        return tuple(selected)

    def relevant(self, raw_changes: Iterable[tuple[Change, str]]) -> list[ChangeEvent]:
        """Filter a watchfiles batch down to changes that invalidate the pass."""
        events: list[ChangeEvent] = []
        for change_type, path_str in raw_changes:
            path = Path(path_str)
            category = categorize_change(path, self._files, self._contexts)
            if category is None:
                continue
            if category == "context" and change_type == Change.modified:
                # Content edits inside a directory only matter for files we read
                continue
            kind = _CHANGE_KIND_MAP.get(change_type, "modified")
            events.append(ChangeEvent(path=path, kind=kind, category=category))
        return events

    async def wait_for_change(
        self,
        *,
        stop_event: asyncio.Event | None = None,
    ) -> list[ChangeEvent]:
        """Block until a relevant change arrives.

        Returns an empty list when *stop_event* is set or nothing is watchable.

        """
        paths = self.watch_paths
        if not paths:
            return []
        async for raw_changes in awatch(
            *paths,
            stop_event=stop_event,
            debounce=300,
            step=100,
        ):
            events = self.relevant(raw_changes)
            if events:
                return events
        return []
