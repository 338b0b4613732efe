"""Isolated execution of page-script source.

``Sandbox.execute(source, context)`` compiles the source under the
script's file name, runs it in the context's private namespace, and
returns the script's export as a tagged ``Export``:

    DIRECT           the export is itself callable
    DEFAULT_WRAPPED  the export is an object (e.g. a required module or the
                     script's own namespace) whose ``default`` attribute is
                     the value to use; unwrapped exactly one level

The shape is decided here, once, so callers never inspect exports.
The script's module is registered in ``sys.modules`` while it executes, so
class-level machinery that resolves ``cls.__module__`` works as in a normal
import.  Isolation is for namespacing only; scripts run with full
interpreter access.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pawprint.sandbox.context import ExecutionContext


class ExportKind(Enum):
    DIRECT = "direct"
    DEFAULT_WRAPPED = "default_wrapped"
    UNUSABLE = "unusable"


@dataclass(frozen=True, slots=True)
class Export:
    """What a script exported, already unwrapped.

    Attributes:
        kind: How the value was found.
        value: The callable (or, for ``UNUSABLE``, the raw export).

    """

    kind: ExportKind
    value: Any

    @property
    def usable(self) -> bool:
        return self.kind is not ExportKind.UNUSABLE and callable(self.value)


def classify_export(value: Any) -> Export:
    """Tag a raw export value."""
    if callable(value):
        return Export(ExportKind.DIRECT, value)
    default = getattr(value, "default", None)
    if default is not None:
        return Export(ExportKind.DEFAULT_WRAPPED, default)
    return Export(ExportKind.UNUSABLE, value)


class Sandbox:
    """Runs script source inside an ``ExecutionContext``."""

    def execute(self, source: str, context: ExecutionContext) -> Export:
        """Execute *source* and return its tagged export.

        Exceptions raised while compiling or running the script propagate.

        """
        code = compile(source, str(context.filename), "exec", dont_inherit=True)
        namespace = context.module.namespace
        # Decorators such as @dataclass look their class up in sys.modules
        sys.modules[namespace.__name__] = namespace
        try:
            exec(code, context.namespace())  # noqa: S102
        finally:
            if sys.modules.get(namespace.__name__) is namespace:
                del sys.modules[namespace.__name__]

        module = context.module
        raw = module.exports if module.exports is not None else module.namespace
        return classify_export(raw)
