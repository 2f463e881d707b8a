"""Streaming record parser for FASTQ and paired FASTA/QUAL inputs."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Dict, Iterator, Optional, Sequence, TextIO, Tuple

from ..errors import InputFileError, ParseError, StateMachineError
from .paths import open_input
from .position import Position
from .reader import WHITESPACE, TokenReader
from .records import PHRED_OFFSET, FileKind, ParseState, SequenceRecord

LOGGER = logging.getLogger(__name__)

QUALITY_TOKEN = re.compile(r"-?[0-9]+")


class _Track:
    """One input handle together with its format and parse state."""

    __slots__ = ("reader", "kind", "state")

    def __init__(self, reader: TokenReader, kind: FileKind) -> None:
        self.reader = reader
        self.kind = kind
        self.state = ParseState.AWAITING_RECORD


Handler = Callable[[_Track, SequenceRecord], bool]


def _length_mismatch(length: int, scores: int, position: Position) -> ParseError:
    return ParseError(
        f"malformed file: sequence length ({length}) does not match "
        f"the number of quality scores ({scores})",
        position,
    )


class RecordParser:
    """Drive one state machine per input handle to produce sequence records.

    The primary handle is either a FASTQ file or a FASTA file. A FASTA file
    must be paired with a QUAL companion; its machine runs one full cycle for
    every record the primary produces, and only afterwards.
    """

    def __init__(
        self,
        primary: TokenReader,
        kind: FileKind = FileKind.FASTQ,
        companion: Optional[TokenReader] = None,
        handles: Sequence[TextIO] = (),
    ) -> None:
        if kind is FileKind.QUAL:
            raise ValueError("a QUAL file can only be read as the companion of a FASTA file")
        if kind is FileKind.FASTA and companion is None:
            raise ValueError("a FASTA file requires a QUAL companion")
        if kind is FileKind.FASTQ and companion is not None:
            raise ValueError("a FASTQ file carries its own quality scores")
        self._primary = _Track(primary, kind)
        self._companion = _Track(companion, FileKind.QUAL) if companion is not None else None
        self._handles = list(handles)
        self._handlers: Dict[ParseState, Handler] = {
            ParseState.AWAITING_RECORD: self._await_record,
            ParseState.IDENTIFIER: self._read_identifier,
            ParseState.SEQUENCE: self._read_sequence,
            ParseState.QUALITY: self._read_quality,
        }

    @classmethod
    def open_fastq(cls, path: Path | str) -> "RecordParser":
        handle = open_input(path, FileKind.FASTQ.value)
        LOGGER.debug("Reading FASTQ records from %s", path)
        return cls(TokenReader(handle, str(path)), FileKind.FASTQ, handles=[handle])

    @classmethod
    def open_fasta_qual(cls, fasta: Path | str, qual: Path | str) -> "RecordParser":
        fasta_handle = open_input(fasta, FileKind.FASTA.value)
        try:
            qual_handle = open_input(qual, FileKind.QUAL.value)
        except InputFileError:
            fasta_handle.close()
            raise
        LOGGER.debug("Reading FASTA records from %s with qualities from %s", fasta, qual)
        return cls(
            TokenReader(fasta_handle, str(fasta)),
            FileKind.FASTA,
            TokenReader(qual_handle, str(qual)),
            handles=[fasta_handle, qual_handle],
        )

    @property
    def kind(self) -> FileKind:
        return self._primary.kind

    def close(self) -> None:
        for handle in self._handles:
            handle.close()
        self._handles = []

    def __enter__(self) -> "RecordParser":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __iter__(self) -> Iterator[SequenceRecord]:
        record = SequenceRecord()
        while self.next(record):
            yield record.copy()

    def next(self, record: SequenceRecord) -> bool:
        """Parse the next record into ``record``; return False once input is exhausted.

        ``record`` is cleared first, so one buffer can be reused across calls.
        """

        record.clear()
        companion = self._companion
        if not self._cycle(self._primary, record):
            if companion is not None and companion.reader.skip_whitespace_and_read():
                raise ParseError(
                    "malformed file: quality file has more records than sequence file",
                    companion.reader.position,
                )
            return False

        quality_track = self._primary
        if companion is not None:
            quality_track = companion
            if not self._cycle(companion, record):
                raise ParseError(
                    "malformed file: quality file ended before sequence file",
                    companion.reader.position,
                )

        if len(record.sequence) != len(record.quality):
            raise _length_mismatch(len(record.sequence), len(record.quality), quality_track.reader.position)
        record.length = len(record.sequence)
        return True

    def _cycle(self, track: _Track, record: SequenceRecord) -> bool:
        while True:
            handler = self._handlers.get(track.state)
            if handler is None:
                raise StateMachineError(f"state machine malfunction: unhandled state {track.state!r}")
            if not handler(track, record):
                return False
            if track.state is ParseState.AWAITING_RECORD:
                return True

    def _await_record(self, track: _Track, record: SequenceRecord) -> bool:
        reader = track.reader
        char = reader.skip_whitespace_and_read()
        if not char:
            return False
        if char != track.kind.header:
            raise ParseError("malformed file", reader.position)
        track.state = ParseState.IDENTIFIER
        return True

    def _read_identifier(self, track: _Track, record: SequenceRecord) -> bool:
        reader = track.reader
        text, count = reader.read_until("\n")
        if count < 1:
            raise ParseError("malformed file: missing ID", reader.position)
        if track.kind.has_sequence:
            record.identifier = text.strip()
            track.state = ParseState.SEQUENCE
        else:
            # the companion's own identifier line is not propagated
            track.state = ParseState.QUALITY
        return True

    def _read_sequence(self, track: _Track, record: SequenceRecord) -> bool:
        if not track.kind.has_sequence:
            raise StateMachineError(f"state machine malfunction: {track.kind.value} file has no sequence")
        reader = track.reader
        text, count = reader.read_until(track.kind.separator)
        if count < 1:
            raise ParseError("malformed file: missing sequence", reader.position)
        record.sequence = "".join(text.split())
        if track.kind.has_quality:
            track.state = ParseState.QUALITY
        else:
            # the '>' that ended the body is still pending for the next cycle
            track.state = ParseState.AWAITING_RECORD
        return True

    def _read_quality(self, track: _Track, record: SequenceRecord) -> bool:
        reader = track.reader
        if track.kind is FileKind.FASTQ:
            if reader.read_char() != track.kind.separator:
                raise ParseError("malformed file: missing quality scores", reader.position)
            # rest of the '+' line may repeat the identifier
            reader.read_until("\n")
            expected = len(record.sequence)
            text, count, end = self._read_phred_lines(reader, track.kind.header, expected)
            if count < 1:
                raise ParseError("malformed file: missing quality scores", reader.position)
            if count != expected:
                raise _length_mismatch(expected, count, end)
            record.quality.extend(ord(char) - PHRED_OFFSET for char in text if char not in WHITESPACE)
        elif track.kind is FileKind.QUAL:
            text, count = reader.read_until(track.kind.header, trim=False)
            if count < 1:
                raise ParseError("malformed file: missing quality scores", reader.position)
            for token in text.split():
                if not QUALITY_TOKEN.fullmatch(token):
                    raise ParseError(f"malformed file: invalid quality score {token!r}", reader.position)
                record.quality.append(int(token))
        else:
            raise StateMachineError(f"state machine malfunction: {track.kind.value} file has no quality scores")
        track.state = ParseState.AWAITING_RECORD
        return True

    @staticmethod
    def _read_phred_lines(reader: TokenReader, header: str, expected: int) -> Tuple[str, int, Position]:
        """Collect whole quality lines until ``expected`` scores are read.

        A line opening with ``header`` after the first quality line belongs to
        the next record. Returns the text, its score count and the position of
        the last quality character read.
        """

        lines: list[str] = []
        count = 0
        end = reader.position.copy()
        while count < expected:
            if reader.read_char() != "\n":
                break
            char = reader.peek()
            if not char or (lines and char == header):
                break
            text, found = reader.read_until("\n")
            lines.append(text)
            count += found
            end = reader.position.copy()
        return "".join(lines), count, end
