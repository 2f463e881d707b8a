"""qfilt: quality-based trimming and fragmentation of sequencing reads."""

from __future__ import annotations

__version__ = "0.1.0"

from .errors import InputFileError, ParseError, QfiltError, StateMachineError
from .filters.quality import Fragment, TrimPolicy, extract_fragments
from .io.parser import RecordParser
from .io.records import FileKind, SequenceRecord

__all__ = [
    "__version__",
    "QfiltError",
    "InputFileError",
    "ParseError",
    "StateMachineError",
    "Fragment",
    "TrimPolicy",
    "extract_fragments",
    "RecordParser",
    "FileKind",
    "SequenceRecord",
]
