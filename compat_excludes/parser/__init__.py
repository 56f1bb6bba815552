"""Exclusion declaration parser."""

from compat_excludes.parser.declarations import parse_line, parse_lines

__all__ = ["parse_line", "parse_lines"]
