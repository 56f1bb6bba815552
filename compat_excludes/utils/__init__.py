"""Utility modules for compat-excludes."""

from compat_excludes.utils.atomic import AtomicWriteError, atomic_write_text
from compat_excludes.utils.logging import (
    configure_logging,
    get_logger,
    suite_context,
)
from compat_excludes.utils.result import (
    ConfigError,
    Err,
    ExitCode,
    LoadError,
    NotFoundError,
    Ok,
    ParseError,
    Result,
    ResultError,
)

__all__ = [
    # Files
    "AtomicWriteError",
    "atomic_write_text",
    # Logging
    "configure_logging",
    "get_logger",
    "suite_context",
    # Results
    "Ok",
    "Err",
    "Result",
    "ResultError",
    "ExitCode",
    "ParseError",
    "LoadError",
    "NotFoundError",
    "ConfigError",
]
