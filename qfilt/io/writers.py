"""Rendering of retained fragments as FASTA or FASTQ text."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from .records import PHRED_OFFSET, SequenceRecord

if TYPE_CHECKING:
    from ..filters.quality import Fragment

OUTPUT_FORMATS = ("fasta", "fastq")
LINE_WIDTH = 60


def fragment_header(record: SequenceRecord, index: int) -> str:
    """Identifier line body; fragments after the first are numbered from 2."""

    if index > 0:
        return f"{record.identifier} fragment={index + 1}"
    return record.identifier


def write_fragment(
    handle: TextIO,
    record: SequenceRecord,
    fragment: "Fragment",
    index: int = 0,
    fmt: str = "fasta",
    width: int = LINE_WIDTH,
) -> None:
    """Write one fragment of ``record`` to an open file handle."""

    sequence = record.sequence[fragment.start : fragment.end]
    if fmt == "fastq":
        quality = "".join(chr(score + PHRED_OFFSET) for score in record.quality[fragment.start : fragment.end])
        handle.write(f"@{fragment_header(record, index)}\n{sequence}\n+\n{quality}\n")
    elif fmt == "fasta":
        handle.write(f">{fragment_header(record, index)}\n")
        for idx in range(0, len(sequence), width):
            handle.write(sequence[idx : idx + width] + "\n")
    else:
        raise ValueError(f"Unsupported output format: {fmt}")
