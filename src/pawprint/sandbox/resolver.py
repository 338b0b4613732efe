"""Module resolution for page scripts.

Page scripts load shared helpers with ``require``::

    nav = require("./_nav")           # pages/_nav.py, next to the script
    util = require("../lib/util.py")  # relative to the script's directory
    json = require("json")            # regular import

Specifiers starting with ``./`` or ``../`` are rewritten into absolute
paths rooted at the requiring script's directory and loaded from that
file.  Everything else is handed to ``importlib.import_module`` unchanged.

The rewrite step is a plain function so alternative policies (aliases,
search roots) can be swapped in without touching the loader.
"""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
import os
import re
import sys
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from pawprint._errors import EvaluationError

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import ModuleType

    from pawprint._types import RewriteFunc

_RELATIVE_SPECIFIER = re.compile(r"^\.\.?/")

# Prefix for helper modules loaded by path; keeps them out of user namespaces
_MODULE_PREFIX = "pawprint_require"


def rewrite_relative(specifier: str, base_dir: Path) -> str:
    """Rewrite ``./x`` and ``../x`` to an absolute path under *base_dir*.

    Non-relative specifiers are returned unchanged.

    """
    if _RELATIVE_SPECIFIER.match(specifier):
        return os.path.normpath(os.path.join(base_dir, specifier))
    return specifier


class ModuleResolver:
    """Loads modules for ``require`` calls, one cache per build pass.

    Helper files are executed once per resolver and shared by every page
    that requires them.  Creating a new resolver for the next pass picks
    up edited helpers.

    Args:
        rewrite: Specifier rewrite strategy, ``rewrite_relative`` by default.

    """

    def __init__(self, rewrite: RewriteFunc = rewrite_relative) -> None:
        self._rewrite = rewrite
        self._cache: dict[Path, ModuleType] = {}
        self._lock = threading.RLock()

    @property
    def loaded(self) -> tuple[Path, ...]:
        """Helper files loaded by path so far."""
        with self._lock:
            return tuple(self._cache)

    def require_for(self, base_dir: Path) -> Callable[[str], ModuleType]:
        """Return a ``require`` function bound to *base_dir*."""

        def require(specifier: str) -> ModuleType:
            return self.resolve(specifier, base_dir)

        return require

    def resolve(self, specifier: str, base_dir: Path) -> ModuleType:
        """Resolve and load *specifier* as seen from *base_dir*.

        Raises:
            EvaluationError: If the target cannot be found or fails to load.

        """
        if not isinstance(specifier, str) or not specifier:
            msg = f"require() expects a non-empty string, got {specifier!r}"
            raise EvaluationError(msg)

        target = self._rewrite(specifier, base_dir)
        if os.path.isabs(target):
            return self._load_file(_locate(Path(target), specifier))

        try:
            return importlib.import_module(target)
        except ImportError as exc:
            msg = f"Cannot require {specifier!r}: {exc}"
            raise EvaluationError(msg) from exc

    def _load_file(self, path: Path) -> ModuleType:
        with self._lock:
            cached = self._cache.get(path)
            if cached is not None:
                return cached

            digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
            module_name = f"{_MODULE_PREFIX}_{path.stem}_{digest}"
            spec = importlib.util.spec_from_file_location(module_name, path)
            if spec is None or spec.loader is None:
                msg = f"Cannot load {path} as a Python module"
                raise EvaluationError(msg)

            module = importlib.util.module_from_spec(spec)
            # Helpers resolve their own relative requires from their directory
            module.require = self.require_for(path.parent)  # type: ignore[attr-defined]
            # Cached before execution so circular requires see the partial module
            self._cache[path] = module
            sys.modules[module_name] = module
            try:
                spec.loader.exec_module(module)
            except Exception as exc:
                del self._cache[path]
                sys.modules.pop(module_name, None)
                msg = f"Failed to load {path}: {exc}"
                raise EvaluationError(msg) from exc
            return module


def _locate(path: Path, specifier: str) -> Path:
    """Find the file a path specifier refers to.

    Tries the path itself, then with ``.py`` appended, then as a package
    directory containing ``__init__.py``.

    """
    candidates = [path]
    if path.suffix != ".py":
        candidates.append(path.with_name(path.name + ".py"))
    candidates.append(path / "__init__.py")
    for candidate in candidates:
        if candidate.is_file():
            return candidate.resolve()
    msg = f"Cannot require {specifier!r}: no module at {path}"
    raise EvaluationError(msg)
