"""Pawprint configuration.

PawprintConfig is the central configuration object, frozen and validated
on creation.  Invalid values fail fast with ConfigurationError.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path

from pawprint._errors import ConfigurationError

DEFAULT_CONCURRENCY = 100
DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True, slots=True)
class PawprintOptions:
    """Tuning options for a build pass.

    Attributes:
        concurrency: Maximum number of page builds in flight at once.
        timeout: Seconds a single page build may take before its slot is
            released and the page is reported as failed.  ``None`` disables
            the limit.

    """

    concurrency: int = DEFAULT_CONCURRENCY
    timeout: float | None = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if isinstance(self.concurrency, bool) or not isinstance(self.concurrency, int):
            msg = f"options.concurrency must be an integer, got {self.concurrency!r}"
            raise ConfigurationError(msg)
        if self.concurrency <= 0:
            msg = f"options.concurrency must be > 0, got {self.concurrency}"
            raise ConfigurationError(msg)
        if self.timeout is not None:
            if isinstance(self.timeout, bool) or not isinstance(self.timeout, int | float):
                msg = f"options.timeout must be a number, got {self.timeout!r}"
                raise ConfigurationError(msg)
            if self.timeout <= 0:
                msg = f"options.timeout must be > 0, got {self.timeout}"
                raise ConfigurationError(msg)

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> PawprintOptions:
        """Build options from a plain mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            msg = f"Unknown option(s): {', '.join(unknown)}"
            raise ConfigurationError(msg)
        return cls(**data)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class PawprintConfig:
    """Configuration for a pawprint build.

    Attributes:
        root: Project root.  Always resolved to an absolute path on construction.
        components_dir: Directory holding fragment templates.
        pages_dir: Directory holding page-definition scripts.
        dest_dir: Output directory for rendered pages.
        options: Build tuning (concurrency, timeout).  A plain mapping is
            accepted and converted.
        fragment_glob: Pattern matched recursively under ``components_dir``.
        page_glob: Pattern matched recursively under ``pages_dir``.

    """

    root: Path = field(default_factory=Path.cwd)
    components_dir: str = "components"
    pages_dir: str = "pages"
    dest_dir: Path = field(default_factory=lambda: Path("dist"))
    options: PawprintOptions = field(default_factory=PawprintOptions)
    fragment_glob: str = "*.html"
    page_glob: str = "*.py"

    def __post_init__(self) -> None:
        if not isinstance(self.root, Path):
            object.__setattr__(self, "root", Path(self.root))
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        if not isinstance(self.dest_dir, Path):
            if not str(self.dest_dir).strip():
                msg = "dest_dir must not be empty"
                raise ConfigurationError(msg)
            object.__setattr__(self, "dest_dir", Path(str(self.dest_dir)))

        if isinstance(self.options, Mapping):
            object.__setattr__(self, "options", PawprintOptions.from_mapping(self.options))
        elif not isinstance(self.options, PawprintOptions):
            msg = f"options must be a mapping, got {type(self.options).__name__}"
            raise ConfigurationError(msg)

        for name in ("components_dir", "pages_dir", "fragment_glob", "page_glob"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                msg = f"{name} must be a non-empty string, got {value!r}"
                raise ConfigurationError(msg)

    @property
    def components_path(self) -> Path:
        """Absolute path to the fragment templates directory."""
        return self.root / self.components_dir

    @property
    def pages_path(self) -> Path:
        """Absolute path to the page scripts directory."""
        return self.root / self.pages_dir

    @property
    def output_path(self) -> Path:
        """Absolute path to the output directory."""
        if self.dest_dir.is_absolute():
            return self.dest_dir
        return self.root / self.dest_dir
