"""Committing pages to the compilation and recording their inputs."""

from pawprint.output.dedup import CREATED_FLAG, OutputDeduplicator
from pawprint.output.dependencies import DependencyTracker

__all__ = ["CREATED_FLAG", "DependencyTracker", "OutputDeduplicator"]
