"""Result type for explicit error handling.

Expected failures (a malformed exclusion line, a missing file, an unknown
test name) are returned as ``Err`` values instead of being raised, so every
caller has to decide what a failure means for its run.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Generic, NoReturn, Optional, TypeVar, Union

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Mapped type


class ResultError(Exception):
    """Raised when unwrapping a Result fails."""

    pass


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Represents a successful result."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ResultError(f"Called unwrap_err on Ok value: {self.value}")

    def map(self, fn: Callable[[T], U]) -> "Ok[U]":
        """Transform the success value."""
        return Ok(fn(self.value))

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        """Chain another Result-returning operation."""
        return fn(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Err(Generic[E]):
    """Represents an error result."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ResultError(f"Called unwrap on Err value: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        return self.error

    def map(self, fn: Callable[[T], U]) -> "Err[E]":
        return self

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Err[E]":
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err[E]]


@dataclass(frozen=True)
class ParseError:
    """A declaration line that could not be parsed."""

    line_number: int
    line: str
    message: str
    source: Optional[str] = None

    def __str__(self) -> str:
        where = f"{self.source}:{self.line_number}" if self.source else f"line {self.line_number}"
        return f"{where}: {self.message}: {self.line.strip()!r}"


@dataclass(frozen=True)
class LoadError:
    """An exclusion file or directory that could not be loaded."""

    path: Path
    message: str
    cause: Optional[ParseError] = None

    def __str__(self) -> str:
        if self.cause:
            return f"Failed to load {self.path}: {self.cause}"
        return f"Failed to load {self.path}: {self.message}"


@dataclass(frozen=True)
class NotFoundError:
    """Lookup of a test name that has no exclusion."""

    test_name: str
    suite: Optional[str] = None

    def __str__(self) -> str:
        if self.suite:
            return f"No exclusion for '{self.test_name}' in suite '{self.suite}'"
        return f"No exclusion for '{self.test_name}'"


@dataclass(frozen=True)
class ConfigError:
    """Error in configuration."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"Config error in '{self.field}': {self.message}"


class ExitCode:
    """Exit codes for CLI."""

    SUCCESS = 0
    GENERAL_ERROR = 1

    # Configuration errors (10-19)
    CONFIG_INVALID = 10

    # Load errors (20-29)
    PARSE_FAILED = 20
    PATH_NOT_FOUND = 21

