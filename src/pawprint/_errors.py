"""Pawprint error hierarchy.

All pawprint-specific errors inherit from PawprintError for easy catching.
"""


class PawprintError(Exception):
    """Base error for all pawprint operations."""


class ConfigurationError(PawprintError):
    """Invalid or missing configuration."""


class EvaluationError(PawprintError):
    """A page script did not yield a usable page-data function."""


class RenderError(PawprintError):
    """A page could not be rendered (missing fragment, template failure)."""


class SourceReadError(PawprintError, OSError):
    """A fragment or page source file could not be read."""


class BuildError(PawprintError):
    """Error in the host build (writing output, hook failures)."""
