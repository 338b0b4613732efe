"""Shared type definitions for pawprint."""

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

# Name a fragment is registered (and included) under
type FragmentName = str

# Data object produced by a page script
type PageDescriptor = Mapping[str, Any]

# Zero-argument callable returning page data
type PageDataFn = Callable[[], PageDescriptor]

# Output asset name relative to the destination root (e.g. "blog/post.html")
type AssetName = str

# Specifier rewrite strategy: (specifier, script directory) -> target
type RewriteFunc = Callable[[str, Path], str]
