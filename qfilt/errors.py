"""Exception types raised while reading and trimming reads."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .io.position import Position


class QfiltError(RuntimeError):
    """Base class for every fatal qfilt error."""


class InputFileError(QfiltError):
    """Raised when a configured input file cannot be opened."""

    def __init__(self, kind: str, path: Path | str) -> None:
        self.kind = kind
        self.path = Path(path)
        super().__init__(f"failed to open the {kind} file {path}")


class ParseError(QfiltError):
    """Raised on malformed input; carries the location of the offending character."""

    def __init__(self, message: str, position: "Position") -> None:
        self.message = message
        self.position = position.copy()
        super().__init__(f"ERROR ({self.position}): {message}")


class StateMachineError(QfiltError):
    """Raised when the record parser reaches a state it cannot handle."""
