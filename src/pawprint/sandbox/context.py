"""Execution context handed to a page script.

A page script runs in a fresh module namespace that sees:

    PAWPRINT      True — lets shared code detect it runs inside a build
    module        PageModule bound to the script (assign ``module.exports``)
    require       Resolver bound to the script's directory
    __file__      Absolute path of the script
    __dirname__   Directory of the script

Each page gets its own module object under a name derived from its path,
so two pages never share globals.  The module is visible in ``sys.modules``
only while its script runs.
"""

from __future__ import annotations

import builtins
import hashlib
import types
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

# Name of the flag global marking execution under pawprint
BUILD_FLAG = "PAWPRINT"


class PageModule:
    """Module identity for a page script.

    Scripts export their page-data function either by assigning
    ``module.exports`` or by defining a module-level ``default`` function.

    """

    __slots__ = ("dirname", "exports", "filename", "namespace")

    def __init__(self, filename: Path) -> None:
        self.filename = filename
        self.dirname = filename.parent
        self.exports: Any = None
        self.namespace = types.ModuleType(_module_name(filename))
        self.namespace.__file__ = str(filename)

    def __repr__(self) -> str:
        return f"<PageModule {self.filename}>"


@dataclass(slots=True)
class ExecutionContext:
    """Everything a script execution needs besides its source.

    Attributes:
        module: Identity object for the script.
        require: Module-resolution function bound to the script's directory.
        extra_globals: Additional names injected into the namespace.

    """

    module: PageModule
    require: Callable[[str], Any]
    extra_globals: dict[str, Any] = field(default_factory=dict)

    @property
    def filename(self) -> Path:
        return self.module.filename

    def namespace(self) -> dict[str, Any]:
        """Populate and return the module namespace the script runs in."""
        ns = self.module.namespace.__dict__
        ns.update(self.extra_globals)
        ns.update({
            "__builtins__": builtins,
            "__dirname__": str(self.module.dirname),
            BUILD_FLAG: True,
            "module": self.module,
            "require": self.require,
        })
        return ns


def _module_name(filename: Path) -> str:
    digest = hashlib.sha1(str(filename).encode("utf-8")).hexdigest()[:12]
    return f"pawprint_page_{filename.stem}_{digest}"
