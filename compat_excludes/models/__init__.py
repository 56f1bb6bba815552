"""Data models for compat-excludes."""

from compat_excludes.models.exclusion import (
    ExclusionEntry,
    SkipDecision,
    normalize_test_name,
)

__all__ = [
    "ExclusionEntry",
    "SkipDecision",
    "normalize_test_name",
]
