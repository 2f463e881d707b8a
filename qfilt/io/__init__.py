"""IO helpers for qfilt."""

from .parser import RecordParser
from .paths import now_iso, open_input, open_output, write_json
from .position import Position
from .reader import TokenReader
from .records import FileKind, ParseState, SequenceRecord
from .writers import write_fragment

__all__ = [
    "RecordParser",
    "Position",
    "TokenReader",
    "FileKind",
    "ParseState",
    "SequenceRecord",
    "open_input",
    "open_output",
    "write_json",
    "now_iso",
    "write_fragment",
]
