"""Unit tests for the character-level token reader."""

from __future__ import annotations

import io

import pytest

from qfilt.errors import StateMachineError
from qfilt.io.reader import TokenReader


def _reader(text: str) -> TokenReader:
    return TokenReader(io.StringIO(text), "mem")


def test_skip_whitespace_tracks_lines_and_columns() -> None:
    reader = _reader("  \n\t@x")
    assert reader.skip_whitespace_and_read() == "@"
    assert reader.position.line == 1
    assert reader.position.column == 2


def test_read_until_leaves_delimiter_pending() -> None:
    reader = _reader("ACGT+rest")
    assert reader.read_until("+") == ("ACGT", 4)
    assert reader.position.column == 4
    assert reader.read_char() == "+"
    assert reader.position.column == 5


def test_read_until_trim_joins_wrapped_lines() -> None:
    reader = _reader("ACG\nTTA\r\n\n  GG\n>next")
    text, count = reader.read_until(">")
    assert text == "ACGTTAGG"
    assert count == 8
    assert reader.peek() == ">"
    assert reader.position.line == 4


def test_read_until_without_trim_keeps_newlines() -> None:
    reader = _reader("\n30 31\n32\n>r2")
    text, count = reader.read_until(">", trim=False)
    assert text == "\n30 31\n32\n"
    assert count == 6
    assert reader.read_char() == ">"


def test_read_until_line_end_leaves_newline_pending() -> None:
    reader = _reader("II@I\r\n@r2")
    text, count = reader.read_until("\n")
    assert (text, count) == ("II@I", 4)
    assert (reader.position.line, reader.position.column) == (0, 5)
    assert reader.read_char() == "\n"
    assert reader.peek() == "@"


def test_end_of_input() -> None:
    reader = _reader("")
    assert reader.skip_whitespace_and_read() == ""
    assert reader.read_until(">") == ("", 0)
    assert reader.read_char() == ""


def test_only_one_character_of_pushback() -> None:
    reader = _reader("ab")
    assert reader.read_char() == "a"
    reader.unread()
    with pytest.raises(StateMachineError):
        reader.unread()
    assert reader.read_char() == "a"
    assert reader.read_char() == "b"
