"""Reporting over loaded exclusion lists."""

from compat_excludes.reporter.summary import (
    ExclusionSummary,
    SuiteSummary,
    SummaryRenderer,
)

__all__ = [
    "ExclusionSummary",
    "SuiteSummary",
    "SummaryRenderer",
]
