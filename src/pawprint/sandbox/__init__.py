"""Page-script evaluation in isolated namespaces.

Exports: Evaluator, Sandbox, Export, ExportKind, ExecutionContext,
PageModule, ModuleResolver, rewrite_relative.
"""

from pawprint.sandbox.context import BUILD_FLAG, ExecutionContext, PageModule
from pawprint.sandbox.evaluator import Evaluator
from pawprint.sandbox.isolation import Export, ExportKind, Sandbox, classify_export
from pawprint.sandbox.resolver import ModuleResolver, rewrite_relative

__all__ = [
    "BUILD_FLAG",
    "Evaluator",
    "ExecutionContext",
    "Export",
    "ExportKind",
    "ModuleResolver",
    "PageModule",
    "Sandbox",
    "classify_export",
    "rewrite_relative",
]
