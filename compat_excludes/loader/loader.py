"""Load exclusion files into registries.

An exclusion directory holds one file per test suite, named after the suite
(``excludes/TestProcess.rb`` applies to the ``TestProcess`` suite). Every
file is parsed fresh on each run; registries come back frozen.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Union

from compat_excludes.parser import parse_lines
from compat_excludes.registry import ExclusionIndex, ExclusionRegistry
from compat_excludes.utils.logging import get_logger, suite_context
from compat_excludes.utils.result import Err, LoadError, Ok, ParseError, Result

logger = get_logger("loader")

DEFAULT_PATTERN = "*.rb"


class ErrorPolicy(str, Enum):
    """What to do with a malformed declaration line."""

    ABORT = "abort"  # Fail the whole load
    SKIP = "skip"  # Log the line and keep loading


class ExclusionLoader:
    """
    Builds frozen exclusion registries from declaration text.

    With ``ErrorPolicy.ABORT`` the first malformed line fails the load, since a
    silently dropped exclusion shows up later as an unexpected test failure.
    With ``ErrorPolicy.SKIP`` bad lines are logged and collected in
    ``skipped``.
    """

    def __init__(
        self,
        policy: Union[ErrorPolicy, str] = ErrorPolicy.ABORT,
        pattern: str = DEFAULT_PATTERN,
    ) -> None:
        """
        Initialize the loader.

        Args:
            policy: Handling of malformed lines ('abort' or 'skip')
            pattern: Glob selecting exclusion files inside a directory
        """
        self.policy = ErrorPolicy(policy)
        self.pattern = pattern
        self.skipped: list[ParseError] = []

    def load_lines(
        self,
        lines: Iterable[str],
        suite: Optional[str] = None,
        source: Optional[str] = None,
    ) -> Result[ExclusionRegistry, ParseError]:
        """
        Parse declaration lines into a frozen registry.

        Args:
            lines: Declaration lines
            suite: Suite the exclusions apply to
            source: Name of the origin, used in error messages

        Returns:
            Result with the registry, or the first ParseError under the abort policy
        """
        registry = ExclusionRegistry(suite=suite)

        with suite_context(suite):
            for result in parse_lines(lines, source=source):
                if result.is_err():
                    error = result.unwrap_err()
                    if self.policy is ErrorPolicy.ABORT:
                        logger.error("parse_error", error=str(error))
                        return Err(error)
                    logger.warning("parse_error_skipped", error=str(error))
                    self.skipped.append(error)
                    continue

                entry = result.unwrap()
                registry.register(
                    entry.test_name,
                    entry.reason,
                    source=entry.source,
                    line_number=entry.line_number,
                )

            logger.debug(
                "exclusions_parsed",
                source=source,
                entries=len(registry),
                duplicates=len(registry.duplicates()),
            )

        return Ok(registry.freeze())

    def load_text(
        self,
        text: str,
        suite: Optional[str] = None,
        source: Optional[str] = None,
    ) -> Result[ExclusionRegistry, ParseError]:
        """Parse a whole declaration text into a frozen registry."""
        return self.load_lines(text.splitlines(), suite=suite, source=source)

    def load_file(self, path: Path) -> Result[ExclusionRegistry, LoadError]:
        """
        Load one exclusion file; the suite name is the file stem.

        Returns:
            Result with the registry, or LoadError for unreadable or malformed files
        """
        path = Path(path)

        try:
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("exclusion_file_unreadable", path=str(path), error=str(e))
            return Err(LoadError(path=path, message=f"Cannot read file: {e}"))

        result = self.load_text(text, suite=path.stem, source=str(path))
        if result.is_err():
            error = result.unwrap_err()
            return Err(LoadError(path=path, message=error.message, cause=error))

        return Ok(result.unwrap())

    def load_directory(self, path: Path) -> Result[ExclusionIndex, LoadError]:
        """
        Load every exclusion file of a directory, in file name order.

        Returns:
            Result with the index of all suites, or the first LoadError
        """
        path = Path(path)

        if not path.is_dir():
            logger.error("exclusion_directory_not_found", path=str(path))
            return Err(LoadError(path=path, message="Not a directory"))

        index = ExclusionIndex()
        for file_path in sorted(p for p in path.glob(self.pattern) if p.is_file()):
            result = self.load_file(file_path)
            if result.is_err():
                return result
            index.add(result.unwrap())

        logger.info(
            "exclusions_loaded",
            path=str(path),
            suites=len(index),
            entries=index.total_entries(),
            skipped_lines=len(self.skipped),
        )

        return Ok(index.freeze())

    def load_path(self, path: Path) -> Result[ExclusionIndex, LoadError]:
        """Load either a single exclusion file or a directory into an index."""
        path = Path(path)
        if path.is_file():
            return self.load_file(path).map(
                lambda registry: ExclusionIndex({registry.suite: registry}).freeze()
            )
        return self.load_directory(path)


def load_directory(
    path: Path,
    pattern: str = DEFAULT_PATTERN,
    policy: Union[ErrorPolicy, str] = ErrorPolicy.ABORT,
) -> Result[ExclusionIndex, LoadError]:
    """Load an exclusion directory with a fresh loader."""
    return ExclusionLoader(policy=policy, pattern=pattern).load_directory(path)


def load_file(
    path: Path,
    policy: Union[ErrorPolicy, str] = ErrorPolicy.ABORT,
) -> Result[ExclusionRegistry, LoadError]:
    """Load one exclusion file with a fresh loader."""
    return ExclusionLoader(policy=policy).load_file(path)
