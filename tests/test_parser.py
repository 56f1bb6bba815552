"""
Tests for the exclusion declaration parser.
"""

import pytest

from compat_excludes.models import ExclusionEntry
from compat_excludes.parser import parse_line, parse_lines


def parse_ok(line):
    result = parse_line(line)
    assert result.is_ok(), result
    return result.unwrap()


def parse_err(line):
    result = parse_line(line, line_number=7, source="TestProcess.rb")
    assert result.is_err(), result
    return result.unwrap_err()


class TestParseLine:
    """Tests for single declaration lines."""

    def test_symbol_declaration(self):
        """The canonical form parses into name and reason."""
        entry = parse_ok('exclude :test_abort, "needs investigation"')

        assert entry.test_name == "test_abort"
        assert entry.reason == "needs investigation"

    def test_predicate_symbol(self):
        """Identifiers may end in a question mark."""
        entry = parse_ok('exclude :test_gid_sid_available?, "needs investigation"')

        assert entry.test_name == "test_gid_sid_available?"

    def test_reason_with_punctuation(self):
        """Commas and colons inside the reason are kept."""
        entry = parse_ok('exclude :test_too_long_path, "works, but dumps a massive amount of text to stdout"')

        assert entry.reason == "works, but dumps a massive amount of text to stdout"

    @pytest.mark.parametrize("line", [
        'exclude "test_abort", "needs investigation"',
        "exclude :'test_abort', 'needs investigation'",
        'exclude(:test_abort, "needs investigation")',
        'exclude (:test_abort, "needs investigation")',
        'exclude test_abort, "needs investigation"',
        'exclude(test_abort, "needs investigation")',
        '  exclude   :test_abort ,  "needs investigation"   ',
        'exclude :test_abort, "needs investigation" # tracked upstream',
    ])
    def test_accepted_variants(self, line):
        """Quoted names, parentheses, extra spacing and trailing comments are accepted."""
        entry = parse_ok(line)

        assert entry.test_name == "test_abort"
        assert entry.reason == "needs investigation"

    def test_bare_predicate_name(self):
        """Bare identifiers keep their trailing question mark."""
        entry = parse_ok('exclude test_uid_sid_available?, "needs investigation"')

        assert entry.test_name == "test_uid_sid_available?"

    def test_quoted_symbol_with_spaces(self):
        """Quoted symbols may contain spaces."""
        entry = parse_ok('exclude :"test: with spaces", "odd name"')

        assert entry.test_name == "test: with spaces"

    def test_double_quote_escapes(self):
        """Escapes in double-quoted reasons are decoded."""
        entry = parse_ok(r'exclude :test_a, "say \"hi\"\tnow"')

        assert entry.reason == 'say "hi"\tnow'

    def test_single_quote_keeps_backslashes(self):
        """Single-quoted reasons only decode quote and backslash escapes."""
        entry = parse_ok(r"exclude :test_a, 'it\'s \n literal'")

        assert entry.reason == "it's \\n literal"

    def test_empty_reason(self):
        """An empty reason string is valid."""
        assert parse_ok('exclude :test_a, ""').reason == ""

    @pytest.mark.parametrize("line", ["", "   ", "# a comment", "   # indented comment"])
    def test_blank_and_comment_lines(self, line):
        """Blank lines and comments produce no entry."""
        assert parse_ok(line) is None

    def test_location_is_recorded(self):
        """Entries remember where they were declared."""
        result = parse_line('exclude :test_a, "x"', line_number=3, source="TestFile.rb")

        assert result.unwrap() == ExclusionEntry(
            test_name="test_a",
            reason="x",
            source="TestFile.rb",
            line_number=3,
        )


class TestParseErrors:
    """Tests for malformed declaration lines."""

    @pytest.mark.parametrize("line, message", [
        ('exclude :test_abort', "missing reason"),
        ('exclude :test_abort,', "missing reason"),
        ('exclude :test_abort, needs investigation', "missing reason"),
        ('exclude , "needs investigation"', "missing test name"),
        ('exclude', "missing test name"),
        ('exclude "", "needs investigation"', "missing test name"),
        ('exclude :test_abort "needs investigation"', "expected ',' after test name"),
        ('exclude :test_abort, "needs investigation', "unterminated string"),
        ('exclude(:test_abort, "x"', "missing ')'"),
        ('exclude :test_abort, "x" extra', "unexpected text after reason"),
        ('exclude :1abc, "x"', "invalid test name"),
        ('include :test_abort, "x"', "unrecognized declaration"),
        ('excluded :test_abort, "x"', "unrecognized declaration"),
    ])
    def test_error_messages(self, line, message):
        """Each malformed form reports what is wrong."""
        error = parse_err(line)

        assert error.message == message

    def test_error_identifies_line(self):
        """Errors carry the source, line number and text."""
        error = parse_err('exclude :test_abort')

        assert error.source == "TestProcess.rb"
        assert error.line_number == 7
        assert error.line == "exclude :test_abort"
        assert str(error).startswith("TestProcess.rb:7: missing reason")


class TestParseLines:
    """Tests for multi-line parsing."""

    def test_skips_blank_and_comment_lines(self):
        """Only declarations and errors are yielded, with file line numbers."""
        lines = [
            "# header",
            'exclude :test_abort, "needs investigation"',
            "",
            "exclude :test_wait2",
            'exclude :test_waitall, "needs investigation"',
        ]

        results = list(parse_lines(lines, source="TestProcess.rb"))

        assert len(results) == 3
        assert results[0].unwrap().line_number == 2
        assert results[1].unwrap_err().line_number == 4
        assert results[2].unwrap().test_name == "test_waitall"

    def test_empty_input(self):
        """No lines yield no results."""
        assert list(parse_lines([])) == []
