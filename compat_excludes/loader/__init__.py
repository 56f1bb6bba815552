"""Loading of exclusion files and directories."""

from compat_excludes.loader.loader import (
    DEFAULT_PATTERN,
    ErrorPolicy,
    ExclusionLoader,
    load_directory,
    load_file,
)

__all__ = [
    "DEFAULT_PATTERN",
    "ErrorPolicy",
    "ExclusionLoader",
    "load_directory",
    "load_file",
]
