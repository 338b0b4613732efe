"""Dependency tracker — make every source file a build input.

After the build phase, both roots are scanned again and every discovered
file is added to the compilation's ``file_dependencies``, whether or not it
produced a page.  Underscore helpers and scripts that failed to evaluate
are included, so fixing or editing any of them triggers a rebuild.  The
roots themselves become ``context_dependencies`` so added or removed files
are noticed too.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pawprint.discovery import discover

if TYPE_CHECKING:
    from pathlib import Path

    from pawprint.host.compilation import Compilation


class DependencyTracker:
    """Records fragment and page files as inputs of a compilation.

    Args:
        compilation: Compilation receiving the dependencies.
        fragment_glob: Pattern for fragment files.
        page_glob: Pattern for page files.

    """

    def __init__(
        self,
        compilation: Compilation,
        *,
        fragment_glob: str = "*.html",
        page_glob: str = "*.py",
    ) -> None:
        self._compilation = compilation
        self._fragment_glob = fragment_glob
        self._page_glob = page_glob

    def record(self, components_root: Path, pages_root: Path) -> tuple[Path, ...]:
        """Add every fragment and page file; return what was added."""
        files = (
            *discover(pages_root, self._page_glob),
            *discover(components_root, self._fragment_glob),
        )
        self._compilation.file_dependencies.update(files)
        for root in (components_root, pages_root):
            self._compilation.context_dependencies.add(root.resolve())
        return files
