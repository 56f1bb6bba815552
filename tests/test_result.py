"""
Tests for the Result type and error records.
"""

from pathlib import Path

import pytest

from compat_excludes.utils.result import (
    Err,
    LoadError,
    NotFoundError,
    Ok,
    ParseError,
    ResultError,
)


class TestResult:
    """Tests for Ok and Err."""

    def test_ok(self):
        result = Ok("needs investigation")

        assert result.is_ok()
        assert result.unwrap() == "needs investigation"
        assert result.unwrap_or(None) == "needs investigation"
        assert result.map(str.upper).unwrap() == "NEEDS INVESTIGATION"
        with pytest.raises(ResultError):
            result.unwrap_err()

    def test_err(self):
        result = Err(NotFoundError(test_name="test_list"))

        assert result.is_err()
        assert result.unwrap_or(None) is None
        assert result.map(str.upper) is result
        with pytest.raises(ResultError):
            result.unwrap()

    def test_and_then(self):
        """Chaining stops at the first error."""
        assert Ok(1).and_then(lambda v: Ok(v + 1)).unwrap() == 2
        assert Ok(1).and_then(lambda v: Err("bad")).unwrap_err() == "bad"
        assert Err("first").and_then(lambda v: Ok(v)).unwrap_err() == "first"


class TestErrorRecords:
    """Tests for error messages."""

    def test_not_found_message(self):
        assert str(NotFoundError("test_list")) == "No exclusion for 'test_list'"
        assert str(NotFoundError("test_list", suite="TestProcess")) == (
            "No exclusion for 'test_list' in suite 'TestProcess'"
        )

    def test_parse_error_without_source(self):
        error = ParseError(line_number=4, line="exclude :x\n", message="missing reason")

        assert str(error) == "line 4: missing reason: 'exclude :x'"

    def test_load_error_prefers_cause(self):
        cause = ParseError(line_number=1, line="exclude", message="missing test name", source="T.rb")
        error = LoadError(path=Path("T.rb"), message="missing test name", cause=cause)

        assert str(error) == "Failed to load T.rb: T.rb:1: missing test name: 'exclude'"
