"""Data models for exclusion declarations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


def normalize_test_name(test_name: str) -> str:
    """Strip the symbol colon so ``:test_abort`` and ``test_abort`` are one key."""
    return test_name[1:] if test_name.startswith(":") else test_name


@dataclass(frozen=True)
class ExclusionEntry:
    """
    A single excluded test case.

    Attributes:
        test_name: Identifier of the test case within its suite
        reason: Free-text explanation, recorded as the skip annotation
        source: File the declaration was read from, if any
        line_number: Line of the declaration within ``source``
    """

    test_name: str
    reason: str
    source: Optional[str] = None
    line_number: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "test_name": self.test_name,
            "reason": self.reason,
            "source": self.source,
            "line_number": self.line_number,
        }


@dataclass(frozen=True)
class SkipDecision:
    """Outcome of filtering one test case against the exclusion lists."""

    suite: str
    test_name: str
    skip: bool
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "suite": self.suite,
            "test_name": self.test_name,
            "skip": self.skip,
            "reason": self.reason,
        }
