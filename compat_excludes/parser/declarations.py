"""Parser for exclusion declaration lines.

An exclusion file holds one declaration per line::

    exclude :test_abort, "needs investigation"
    exclude :test_gid_sid_available?, "needs investigation"
    exclude test_wait2, "needs investigation"
    exclude (:"test name with spaces", 'single quoted reason')  # comment

Blank lines and ``#`` comments are ignored.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, Optional

from compat_excludes.models import ExclusionEntry
from compat_excludes.utils.result import Err, Ok, ParseError, Result

KEYWORD = "exclude"

IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*[?!=]?")

DOUBLE_QUOTE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "s": " ",
    "0": "\0",
    "e": "\x1b",
}


class _SyntaxIssue(Exception):
    """Internal signal carrying the message of a malformed declaration."""


class _Scanner:
    """Cursor over the argument text of one declaration."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def skip_space(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in " \t":
            self.pos += 1

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def accept(self, char: str) -> bool:
        if self.peek() == char:
            self.pos += 1
            return True
        return False

    def rest(self) -> str:
        return self.text[self.pos:]

    def read_identifier(self) -> Optional[str]:
        match = IDENTIFIER.match(self.text, self.pos)
        if not match:
            return None
        self.pos = match.end()
        return match.group(0)

    def read_string(self) -> str:
        """Read a single- or double-quoted string literal."""
        quote = self.peek()
        self.pos += 1
        chars: list[str] = []
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == quote:
                self.pos += 1
                return "".join(chars)
            if char == "\\" and self.pos + 1 < len(self.text):
                escaped = self.text[self.pos + 1]
                if quote == '"':
                    chars.append(DOUBLE_QUOTE_ESCAPES.get(escaped, escaped))
                elif escaped in ("'", "\\"):
                    chars.append(escaped)
                else:
                    chars.append(char + escaped)
                self.pos += 2
                continue
            chars.append(char)
            self.pos += 1
        raise _SyntaxIssue("unterminated string")


def _read_test_name(scanner: _Scanner) -> str:
    if scanner.accept(":"):
        if scanner.peek() in ('"', "'"):
            name = scanner.read_string()
        else:
            name = scanner.read_identifier()
            if name is None:
                raise _SyntaxIssue("invalid test name")
    elif scanner.peek() in ('"', "'"):
        name = scanner.read_string()
    else:
        name = scanner.read_identifier()

    if not name:
        raise _SyntaxIssue("missing test name")
    return name


def _read_reason(scanner: _Scanner) -> str:
    scanner.skip_space()
    if not scanner.accept(","):
        if scanner.at_end() or scanner.peek() in ("#", ")"):
            raise _SyntaxIssue("missing reason")
        raise _SyntaxIssue("expected ',' after test name")

    scanner.skip_space()
    if scanner.peek() not in ('"', "'"):
        raise _SyntaxIssue("missing reason")
    return scanner.read_string()


def parse_line(
    line: str,
    line_number: int = 1,
    source: Optional[str] = None,
) -> Result[Optional[ExclusionEntry], ParseError]:
    """
    Parse one declaration line.

    Args:
        line: Raw line text
        line_number: 1-based line number, for error reporting
        source: Name of the file the line came from

    Returns:
        Ok(ExclusionEntry), Ok(None) for blank and comment lines,
        or Err(ParseError) for a malformed declaration
    """
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return Ok(None)

    def fail(message: str) -> Err[ParseError]:
        return Err(ParseError(
            line_number=line_number,
            line=line.rstrip("\r\n"),
            message=message,
            source=source,
        ))

    if not stripped.startswith(KEYWORD):
        return fail("unrecognized declaration")

    scanner = _Scanner(stripped[len(KEYWORD):])
    if scanner.peek() not in (" ", "\t", "("):
        if scanner.at_end():
            return fail("missing test name")
        return fail("unrecognized declaration")

    try:
        scanner.skip_space()
        parenthesized = scanner.accept("(")
        scanner.skip_space()
        test_name = _read_test_name(scanner)
        reason = _read_reason(scanner)
        scanner.skip_space()
        if parenthesized and not scanner.accept(")"):
            raise _SyntaxIssue("missing ')'")
        scanner.skip_space()
        if not scanner.at_end() and not scanner.rest().startswith("#"):
            raise _SyntaxIssue("unexpected text after reason")
    except _SyntaxIssue as e:
        return fail(str(e))

    return Ok(ExclusionEntry(
        test_name=test_name,
        reason=reason,
        source=source,
        line_number=line_number,
    ))


def parse_lines(
    lines: Iterable[str],
    source: Optional[str] = None,
) -> Iterator[Result[ExclusionEntry, ParseError]]:
    """
    Parse declaration lines, skipping blanks and comments.

    Yields one Result per declaration, in file order.
    """
    for line_number, line in enumerate(lines, start=1):
        result = parse_line(line, line_number=line_number, source=source)
        if result.is_err():
            yield result
        elif result.unwrap() is not None:
            yield result
