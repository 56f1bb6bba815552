"""Exclusion registry and the per-directory exclusion index."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from compat_excludes.models import ExclusionEntry, normalize_test_name
from compat_excludes.utils.logging import get_logger
from compat_excludes.utils.result import Err, NotFoundError, Ok, Result

logger = get_logger("registry.tracker")


class RegistryFrozenError(RuntimeError):
    """Raised when registering into a registry after loading has finished."""

    pass


class ExclusionRegistry:
    """
    Mapping from test name to exclusion reason for one test suite.

    Registrations are last-write-wins: registering a name again replaces its
    reason but keeps its original position. Nothing is ever removed. Once
    ``freeze()`` has been called the registry is read-only and can be shared
    between test workers without locking.
    """

    def __init__(self, suite: Optional[str] = None) -> None:
        """
        Initialize an empty registry.

        Args:
            suite: Name of the test suite the exclusions apply to
        """
        self.suite = suite
        self._entries: dict[str, ExclusionEntry] = {}
        self._registrations: dict[str, int] = {}
        self._frozen = False

    def register(
        self,
        test_name: str,
        reason: str,
        source: Optional[str] = None,
        line_number: Optional[int] = None,
    ) -> None:
        """
        Register an exclusion, replacing any earlier reason for the same name.

        Args:
            test_name: Test identifier (a leading ``:`` is ignored)
            reason: Explanation recorded as the skip annotation
            source: File the declaration came from
            line_number: Line number within ``source``
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register '{test_name}': registry for "
                f"{self.suite or 'unnamed suite'} is frozen"
            )

        name = normalize_test_name(test_name)
        previous = self._entries.get(name)
        if previous is not None and previous.reason != reason:
            logger.warning(
                "duplicate_exclusion",
                suite=self.suite,
                test_name=name,
                previous_reason=previous.reason,
                reason=reason,
                line_number=line_number,
            )

        self._entries[name] = ExclusionEntry(
            test_name=name,
            reason=reason,
            source=source,
            line_number=line_number,
        )
        self._registrations[name] = self._registrations.get(name, 0) + 1

    def is_excluded(self, test_name: str) -> bool:
        """Check whether a test is excluded."""
        return normalize_test_name(test_name) in self._entries

    def reason_for(self, test_name: str) -> Result[str, NotFoundError]:
        """
        Get the exclusion reason for a test.

        Returns:
            Ok with the reason, or Err(NotFoundError) if the test is not excluded
        """
        entry = self.get(test_name)
        if entry is None:
            return Err(NotFoundError(
                test_name=normalize_test_name(test_name),
                suite=self.suite,
            ))
        return Ok(entry.reason)

    def get(self, test_name: str) -> Optional[ExclusionEntry]:
        """Get the entry for a test, or None."""
        return self._entries.get(normalize_test_name(test_name))

    def duplicates(self) -> dict[str, int]:
        """Names registered more than once, with their registration counts."""
        return {
            name: count
            for name, count in self._registrations.items()
            if count > 1
        }

    def freeze(self) -> "ExclusionRegistry":
        """End the load phase; later registrations raise RegistryFrozenError."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def entries(self) -> Mapping[str, ExclusionEntry]:
        """Read-only view of the entries in registration order."""
        return MappingProxyType(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, test_name: object) -> bool:
        return isinstance(test_name, str) and self.is_excluded(test_name)

    def __iter__(self) -> Iterator[ExclusionEntry]:
        return iter(list(self._entries.values()))

    def __repr__(self) -> str:
        return f"ExclusionRegistry(suite={self.suite!r}, entries={len(self)})"


class ExclusionIndex:
    """
    Exclusion registries of a whole exclusion directory, keyed by suite.

    A suite without an exclusion file behaves like an empty registry.
    """

    def __init__(self, registries: Optional[Mapping[str, ExclusionRegistry]] = None) -> None:
        self._registries: dict[str, ExclusionRegistry] = dict(registries or {})
        self._frozen = False

    def add(self, registry: ExclusionRegistry) -> None:
        """Add a suite registry, replacing any registry for the same suite."""
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot add suite '{registry.suite}': exclusion index is frozen"
            )
        if not registry.suite:
            raise ValueError("Only registries with a suite name can be indexed")
        self._registries[registry.suite] = registry

    def freeze(self) -> "ExclusionIndex":
        """End the load phase for the index and every registry in it."""
        for registry in self._registries.values():
            registry.freeze()
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def registry_for(self, suite: str) -> Optional[ExclusionRegistry]:
        """Get the registry for a suite, or None if the suite has no exclusions."""
        return self._registries.get(suite)

    def is_excluded(self, suite: str, test_name: str) -> bool:
        registry = self._registries.get(suite)
        return registry is not None and registry.is_excluded(test_name)

    def reason_for(self, suite: str, test_name: str) -> Result[str, NotFoundError]:
        registry = self._registries.get(suite)
        if registry is None:
            return Err(NotFoundError(
                test_name=normalize_test_name(test_name),
                suite=suite,
            ))
        return registry.reason_for(test_name)

    @property
    def suites(self) -> list[str]:
        return sorted(self._registries)

    def total_entries(self) -> int:
        return sum(len(registry) for registry in self._registries.values())

    def __len__(self) -> int:
        return len(self._registries)

    def __iter__(self) -> Iterator[ExclusionRegistry]:
        return iter([self._registries[suite] for suite in self.suites])

    def __repr__(self) -> str:
        return f"ExclusionIndex(suites={len(self)}, entries={self.total_entries()})"
