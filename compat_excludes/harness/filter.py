"""Filtering of discovered test cases against the exclusion index."""

from __future__ import annotations

from typing import Iterable

from compat_excludes.models import SkipDecision, normalize_test_name
from compat_excludes.registry import ExclusionIndex
from compat_excludes.utils.logging import get_logger

logger = get_logger("harness.filter")


class ExclusionFilter:
    """
    Decides, per discovered test case, whether the harness should run it.

    The index is passed in by the harness and only read, so one filter can be
    shared by parallel workers.
    """

    def __init__(self, index: ExclusionIndex) -> None:
        self.index = index

    def decide(self, suite: str, test_name: str) -> SkipDecision:
        """Get the skip decision for one test case."""
        name = normalize_test_name(test_name)
        result = self.index.reason_for(suite, name)
        if result.is_err():
            return SkipDecision(suite=suite, test_name=name, skip=False)
        return SkipDecision(
            suite=suite,
            test_name=name,
            skip=True,
            reason=result.unwrap(),
        )

    def partition(
        self,
        suite: str,
        test_names: Iterable[str],
    ) -> tuple[list[str], list[SkipDecision]]:
        """
        Split a suite's test cases into those to run and those to skip.

        Returns:
            Tuple of (test names to run, skip decisions with their reasons)
        """
        to_run: list[str] = []
        skipped: list[SkipDecision] = []

        for test_name in test_names:
            decision = self.decide(suite, test_name)
            if decision.skip:
                skipped.append(decision)
            else:
                to_run.append(test_name)

        if skipped:
            logger.info(
                "tests_excluded",
                suite=suite,
                excluded=len(skipped),
                remaining=len(to_run),
            )

        return to_run, skipped
