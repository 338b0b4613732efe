"""Fragment registry — the template namespace of one build pass.

Every file matching the fragment glob under the components root is
registered under a name taken from its path:

    components/card.html          -> card
    components/card/index.html    -> card
    components/nav/item/link.html -> nav

Names come from the first path segment, so a directory groups the files
of one component.  When two files yield the same name, the one registered
last (in sorted path order) wins and the override is logged.

The registry is also the kida loader for the pass: fragments can
``{% include "other" %}`` each other by name, and a page renders the
fragment named by its ``component`` key.  A registry is created per pass
and discarded afterwards, so nothing leaks between passes.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from kida import Environment

from pawprint._errors import RenderError
from pawprint.discovery import discover

if TYPE_CHECKING:
    from pawprint._types import FragmentName, PageDescriptor
    from pawprint.host.compilation import Logger
    from pawprint.observability.collector import BuildCollector


@dataclass(frozen=True, slots=True)
class Fragment:
    """A registered fragment template.

    Attributes:
        name: Registration name (used by ``component`` and ``include``).
        content: Raw template text.
        source: File the fragment was read from, or *None* if registered
            directly.

    """

    name: FragmentName
    content: str
    source: Path | None = None


def fragment_name(relative: str | PurePosixPath) -> str:
    """Derive a fragment name from a path relative to the components root.

    ``card.html`` -> ``card``; ``card/index.html`` -> ``card``.

    """
    parts = PurePosixPath(relative).parts
    if not parts:
        msg = "Cannot derive a fragment name from an empty path"
        raise ValueError(msg)
    head = parts[0]
    if len(parts) == 1:
        head = head.split(".", 1)[0]
    return head


class FragmentRegistry:
    """Name -> Fragment mapping that also serves kida's loader protocol.

    Args:
        logger: Host logger for load messages and skipped files.
        collector: Records a ``FragmentLoaded`` event per registration.
        autoescape: Passed to the kida environment.

    """

    def __init__(
        self,
        *,
        logger: Logger | None = None,
        collector: BuildCollector | None = None,
        autoescape: bool = True,
    ) -> None:
        self._fragments: dict[FragmentName, Fragment] = {}
        self._logger = logger
        self._collector = collector
        self._autoescape = autoescape
        self._env: Environment | None = None

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, name: FragmentName, content: str, source: Path | None = None) -> Fragment:
        """Register *content* under *name*, replacing any earlier fragment."""
        replaced = name in self._fragments
        fragment = Fragment(name=name, content=content, source=source)
        self._fragments[name] = fragment
        # Compiled templates are cached per environment; start a fresh one.
        self._env = None

        if self._collector is not None:
            self._collector.record_fragment(
                name, str(source) if source else "", replaced=replaced,
            )
        if self._logger is not None:
            if replaced:
                self._logger.warn(f"Component {name!r} overridden by {source}")
            else:
                self._logger.log(f"Loaded component: {name}")
        return fragment

    def register_all(self, components_root: Path, pattern: str = "*.html") -> int:
        """Register every fragment file under *components_root*.

        Unreadable and empty files are skipped and logged.  Returns the
        number of files registered.

        """
        count = 0
        for path in discover(components_root, pattern):
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                if self._logger is not None:
                    self._logger.error(f"Cannot read component {path}: {exc}")
                continue
            if not content:
                if self._logger is not None:
                    self._logger.warn(f"Skipping empty component {path}")
                continue

            relative = path.relative_to(components_root.resolve()).as_posix()
            self.register(fragment_name(relative), content, source=path)
            count += 1
        return count

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __contains__(self, name: object) -> bool:
        return name in self._fragments

    def __len__(self) -> int:
        return len(self._fragments)

    def get(self, name: FragmentName) -> Fragment | None:
        return self._fragments.get(name)

    @property
    def sources(self) -> tuple[Path, ...]:
        """Files backing the currently registered fragments."""
        return tuple(f.source for f in self._fragments.values() if f.source is not None)

    # ------------------------------------------------------------------
    # kida loader protocol
    # ------------------------------------------------------------------

    def get_source(self, name: FragmentName) -> tuple[str, str | None]:
        fragment = self._fragments.get(name)
        if fragment is None:
            msg = f"Unknown component {name!r}"
            raise RenderError(msg)
        return fragment.content, str(fragment.source) if fragment.source else None

    def list_templates(self) -> list[FragmentName]:
        return sorted(self._fragments)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @property
    def environment(self) -> Environment:
        """The kida environment loading from this registry."""
        if self._env is None:
            self._env = Environment(loader=self, autoescape=self._autoescape)
        return self._env

    def render(self, name: FragmentName, data: PageDescriptor) -> str:
        """Render fragment *name* with *data* as the template context.

        Raises:
            RenderError: If the fragment is unknown or rendering fails.

        """
        if name not in self._fragments:
            known = ", ".join(self.list_templates()) or "none registered"
            msg = f"Unknown component {name!r} (known: {known})"
            raise RenderError(msg)
        try:
            template = self.environment.get_template(name)
            return template.render(**data)
        except RenderError:
            raise
        except Exception as exc:
            msg = f"Failed to render component {name!r}: {exc}"
            raise RenderError(msg) from exc
