"""Fragment templates — discovery, naming, and per-pass registration."""

from pawprint.fragments.registry import Fragment, FragmentRegistry, fragment_name

__all__ = ["Fragment", "FragmentRegistry", "fragment_name"]
