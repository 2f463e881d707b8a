"""Source position tracking for parse diagnostics."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Position:
    """Line/column of the last character consumed from ``source``.

    ``line`` counts newlines consumed so far and ``column`` counts characters
    consumed on the current line, so both start at 0. Diagnostics print the
    line 1-based, which puts the first character of a file at line 1, column 1.
    """

    source: str
    line: int = 0
    column: int = 0

    def advance(self, char: str) -> None:
        if char == "\n":
            self.line += 1
            self.column = 0
        elif char:
            self.column += 1

    def copy(self) -> "Position":
        return Position(self.source, self.line, self.column)

    def __str__(self) -> str:
        return f"file: {self.source}, line: {self.line + 1}, column: {self.column}"
