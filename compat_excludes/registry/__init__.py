"""Exclusion registry.

Holds the excluded test cases of a run:
- one ExclusionRegistry per test suite (test name -> reason)
- an ExclusionIndex over every suite of an exclusion directory
"""

from compat_excludes.registry.tracker import (
    ExclusionIndex,
    ExclusionRegistry,
    RegistryFrozenError,
)

__all__ = [
    "ExclusionIndex",
    "ExclusionRegistry",
    "RegistryFrozenError",
]
