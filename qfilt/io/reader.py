"""Character-level read primitives shared by every input format."""

from __future__ import annotations

from typing import TextIO, Tuple

from ..errors import StateMachineError
from .position import Position

WHITESPACE = frozenset(" \t\r\n")


class TokenReader:
    """Forward-only reader over one text handle with a single character of pushback.

    Every consumed character moves ``position``; :meth:`unread` moves it back
    by exactly one step, which is all the parser ever needs to hand a peeked
    record header over to the next cycle.
    """

    def __init__(self, handle: TextIO, source: str | None = None) -> None:
        self.handle = handle
        self.position = Position(source or str(getattr(handle, "name", "<stream>")))
        self._buffer = ""
        self._index = 0
        self._last = ""
        self._pushed = False
        self._previous = (0, 0)

    @property
    def source(self) -> str:
        return self.position.source

    def read_char(self) -> str:
        """Consume and return one character, or ``""`` at end of input."""

        if self._pushed:
            self._pushed = False
            char = self._last
        else:
            if self._index >= len(self._buffer):
                self._buffer = self.handle.readline()
                self._index = 0
                if not self._buffer:
                    self._last = ""
                    return ""
            char = self._buffer[self._index]
            self._index += 1
        self._previous = (self.position.line, self.position.column)
        self.position.advance(char)
        self._last = char
        return char

    def unread(self) -> None:
        """Push the last consumed character back onto the stream."""

        if not self._last:
            return
        if self._pushed:
            raise StateMachineError(f"{self.source}: only one character of pushback is supported")
        self._pushed = True
        self.position.line, self.position.column = self._previous

    def peek(self) -> str:
        char = self.read_char()
        self.unread()
        return char

    def skip_whitespace_and_read(self) -> str:
        """Return the next character that is not a space, tab, CR or LF."""

        char = self.read_char()
        while char in WHITESPACE:
            char = self.read_char()
        return char

    def read_until(self, delimiter: str, trim: bool = True) -> Tuple[str, int]:
        """Read up to ``delimiter`` (left unconsumed) and return ``(text, count)``.

        ``count`` is the number of non-whitespace characters collected; callers
        treat a count below 1 as a missing field. With ``trim`` enabled line
        breaks are dropped so wrapped bodies come back as one run of text;
        without it newlines are kept.
        """

        chunks: list[str] = []
        count = 0
        while True:
            char = self.read_char()
            if not char:
                break
            if char == delimiter:
                self.unread()
                break
            if char == "\n":
                if not trim:
                    chunks.append(char)
                    continue
                char = self.skip_whitespace_and_read()
                if not char:
                    break
                if char == delimiter:
                    self.unread()
                    break
            elif char == "\r" and trim:
                continue
            chunks.append(char)
            if char not in WHITESPACE:
                count += 1
        return "".join(chunks), count
