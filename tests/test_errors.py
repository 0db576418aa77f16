"""Tests for strict parsing and ParseError."""

from __future__ import annotations

import pytest

from tinyparse import MatchResult, ParseError, literal, zero_or_more


class TestParseAll:
    def test_complete_match(self):
        assert literal("ab").parse_all("ab") == MatchResult("", True)

    def test_failed_match(self):
        with pytest.raises(ParseError) as excinfo:
            literal("a").parse_all("b")
        assert str(excinfo.value) == "Failed to match."
        assert excinfo.value.pos == 0

    def test_trailing_input(self):
        with pytest.raises(ParseError) as excinfo:
            literal("a").parse_all("ab")
        assert str(excinfo.value) == "Unexpected trailing input."
        assert excinfo.value.pos == 1
        assert "At position 1 (line 1, column 2)" in excinfo.value.__notes__[0]

    def test_note_on_later_line(self):
        parser = literal("a") & "\n" & "b"
        with pytest.raises(ParseError) as excinfo:
            parser.parse_all("a\nbc")
        note = excinfo.value.__notes__[0]
        assert "line 2, column 2" in note
        assert note.endswith("bc\n ^")

    def test_empty_match_of_empty_input(self):
        assert zero_or_more("a").parse_all("") == MatchResult("", True)

    def test_callback_runs_before_error(self):
        seen: list[str] = []
        parser = literal("a").with_callback(seen.append)
        with pytest.raises(ParseError):
            parser.parse_all("ax")
        assert seen == ["a"]


class TestParseError:
    def test_is_exception(self):
        assert issubclass(ParseError, Exception)

    def test_without_message(self):
        error = ParseError("abc", 1)
        assert str(error) == ""
        assert error.src == "abc"

    def test_line_and_column(self):
        error = ParseError("ab\ncde", 5, "bad")
        assert (error.line, error.column) == (2, 3)
        assert error.__notes__ == ["At position 5 (line 2, column 3)\ncde\n  ^"]

    def test_position_past_end_is_clamped(self):
        error = ParseError("ab", 10)
        assert "At position 2" in error.__notes__[0]
