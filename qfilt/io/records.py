"""Record types and the per-handle parse vocabulary."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional

PHRED_OFFSET = 33


class FileKind(enum.Enum):
    """Input flavours understood by the record parser."""

    FASTQ = "FASTQ"
    FASTA = "FASTA"
    QUAL = "QUAL"

    @property
    def header(self) -> str:
        return "@" if self is FileKind.FASTQ else ">"

    @property
    def separator(self) -> Optional[str]:
        if self is FileKind.FASTQ:
            return "+"
        if self is FileKind.FASTA:
            return ">"
        return None

    @property
    def has_sequence(self) -> bool:
        return self is not FileKind.QUAL

    @property
    def has_quality(self) -> bool:
        return self is not FileKind.FASTA


class ParseState(enum.Enum):
    AWAITING_RECORD = "AWAITING_RECORD"
    IDENTIFIER = "IDENTIFIER"
    SEQUENCE = "SEQUENCE"
    QUALITY = "QUALITY"


@dataclass
class SequenceRecord:
    """One read: identifier, bases and per-base Phred scores.

    The parser fills a caller-owned instance; :meth:`clear` resets it in place
    so a single record can be reused for a whole file.
    """

    identifier: str = ""
    sequence: str = ""
    quality: List[int] = field(default_factory=list)
    length: int = 0

    def clear(self) -> None:
        self.identifier = ""
        self.sequence = ""
        self.quality.clear()
        self.length = 0

    def copy(self) -> "SequenceRecord":
        return SequenceRecord(self.identifier, self.sequence, list(self.quality), self.length)

    def __len__(self) -> int:
        return self.length
