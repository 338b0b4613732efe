"""Page-script evaluator — turn a page file into its page-data function.

A page script is ordinary Python.  Either style works::

    # pages/home.py
    def default():
        return {"component": "card", "title": "Hi"}

    # pages/about.py
    nav = require("./_nav")
    module.exports = lambda: {"component": "page", "links": nav.LINKS}

The evaluator reads the file, runs it in a fresh ``ExecutionContext``, and
returns the exported zero-argument callable.  Calling that callable is left
to the page builder.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pawprint._errors import EvaluationError, SourceReadError
from pawprint.sandbox.context import ExecutionContext, PageModule
from pawprint.sandbox.isolation import Sandbox
from pawprint.sandbox.resolver import ModuleResolver

if TYPE_CHECKING:
    from pawprint._types import PageDataFn


class Evaluator:
    """Evaluates page scripts in isolated namespaces.

    Args:
        resolver: Resolves ``require`` calls; share one per build pass.
        sandbox: Execution strategy.

    """

    def __init__(
        self,
        resolver: ModuleResolver | None = None,
        sandbox: Sandbox | None = None,
    ) -> None:
        self._resolver = resolver if resolver is not None else ModuleResolver()
        self._sandbox = sandbox if sandbox is not None else Sandbox()

    @property
    def resolver(self) -> ModuleResolver:
        return self._resolver

    def evaluate(self, path: str | Path | None) -> PageDataFn:
        """Execute the script at *path* and return its page-data function.

        Raises:
            EvaluationError: If the path is empty, the script fails, or its
                export is not callable.
            SourceReadError: If the file cannot be read.

        """
        if not path:
            msg = "The file is empty"
            raise EvaluationError(msg)

        filename = Path(path).resolve()
        try:
            source = filename.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read page {filename}: {exc}"
            raise SourceReadError(msg) from exc

        context = ExecutionContext(
            module=PageModule(filename),
            require=self._resolver.require_for(filename.parent),
        )
        try:
            export = self._sandbox.execute(source, context)
        except EvaluationError:
            raise
        except Exception as exc:
            msg = f"{filename}: {type(exc).__name__}: {exc}"
            raise EvaluationError(msg) from exc

        if not export.usable:
            msg = "Source did not produce an HTML"
            raise EvaluationError(msg)
        return export.value
