"""Tests for the FASTQ and FASTA/QUAL record parser."""

from __future__ import annotations

import gzip
import io
import re
from pathlib import Path

import pytest

from qfilt.errors import InputFileError, ParseError
from qfilt.io.parser import RecordParser
from qfilt.io.reader import TokenReader
from qfilt.io.records import FileKind, SequenceRecord


def _fastq_parser(text: str) -> RecordParser:
    return RecordParser(TokenReader(io.StringIO(text), "reads.fastq"), FileKind.FASTQ)


def _paired_parser(fasta: str, qual: str) -> RecordParser:
    return RecordParser(
        TokenReader(io.StringIO(fasta), "reads.fasta"),
        FileKind.FASTA,
        TokenReader(io.StringIO(qual), "reads.qual"),
    )


def test_single_fastq_record() -> None:
    records = list(_fastq_parser("@r1\nACGTACGT\n+\nIIIIIIII\n"))
    assert len(records) == 1
    record = records[0]
    assert record.identifier == "r1"
    assert record.sequence == "ACGTACGT"
    assert record.quality == [40] * 8
    assert record.length == 8


def test_wrapped_fastq_with_repeated_id_and_at_sign_quality() -> None:
    text = "@r1 desc\nACGT\nAC\n+r1 desc\nII@I\nII\n@r2\nGG\n+\n#I\n"
    records = list(_fastq_parser(text))
    assert [r.identifier for r in records] == ["r1 desc", "r2"]
    assert records[0].sequence == "ACGTAC"
    assert records[0].quality == [40, 40, 31, 40, 40, 40]
    assert records[1].sequence == "GG"
    assert records[1].quality == [2, 40]


def test_reused_record_holds_no_stale_data() -> None:
    parser = _fastq_parser("@long\nACGTACGT\n+\nIIIIIIII\n@short\nTT\n+\n##\n")
    record = SequenceRecord()
    assert parser.next(record)
    assert record.length == 8
    record.clear()
    assert parser.next(record)
    assert record.identifier == "short"
    assert record.sequence == "TT"
    assert record.quality == [2, 2]
    assert record.length == 2
    record.clear()
    assert not parser.next(record)


def test_next_discards_previous_record_contents() -> None:
    parser = _fastq_parser("@r1\nAC\n+\nII\n@r2\nG\n+\n#\n")
    record = SequenceRecord(identifier="old", sequence="GGGG", quality=[1, 2, 3, 4], length=4)
    assert parser.next(record)
    assert record == SequenceRecord(identifier="r1", sequence="AC", quality=[40, 40], length=2)
    assert parser.next(record)
    assert record == SequenceRecord(identifier="r2", sequence="G", quality=[2], length=1)
    assert not parser.next(record)
    assert record == SequenceRecord()


def test_parsing_is_deterministic() -> None:
    text = "@a\nAC\n+\nII\n@b\nGT\n+\n#I\n"
    assert list(_fastq_parser(text)) == list(_fastq_parser(text))


def test_fasta_qual_pair() -> None:
    fasta = ">r1\nACGT\nAC\n>r2\nGGG\n"
    qual = ">r1\n30 31 32\n33 34 35\n>r2\n10\t20 30\n"
    records = list(_paired_parser(fasta, qual))
    assert [r.identifier for r in records] == ["r1", "r2"]
    assert records[0].sequence == "ACGTAC"
    assert records[0].quality == [30, 31, 32, 33, 34, 35]
    assert records[1].quality == [10, 20, 30]


def test_quality_file_identifier_is_not_propagated() -> None:
    records = list(_paired_parser(">seq_name\nAC\n", ">qual_name\n1 2\n"))
    assert records[0].identifier == "seq_name"


def test_paired_count_mismatch_names_both_counts() -> None:
    parser = _paired_parser(">r1\nACGT\n", ">r1\n30 30 30\n")
    with pytest.raises(ParseError) as excinfo:
        list(parser)
    message = str(excinfo.value)
    assert "sequence length (4)" in message
    assert "quality scores (3)" in message
    assert "reads.qual" in message


def test_fastq_count_mismatch() -> None:
    with pytest.raises(ParseError, match=r"sequence length \(4\).*\(3\)"):
        list(_fastq_parser("@r1\nACGT\n+\nIII\n"))


def test_short_fastq_quality_is_reported_at_its_record() -> None:
    parser = _fastq_parser("@r1\nACGTA\n+\nIIII\n@r2\nACGT\n+\nIIII\n")
    with pytest.raises(ParseError) as excinfo:
        list(parser)
    error = excinfo.value
    assert "sequence length (5)" in error.message
    assert "quality scores (4)" in error.message
    assert (error.position.line, error.position.column) == (3, 4)
    assert "line: 4, column: 4" in str(error)


def test_long_fastq_quality_line_is_reported_on_that_line() -> None:
    parser = _fastq_parser("@r1\nACG\n+\nIIII\n@r2\nA\n+\nI\n")
    with pytest.raises(ParseError, match=r"sequence length \(3\).*\(4\)") as excinfo:
        list(parser)
    assert "line: 4, column: 4" in str(excinfo.value)


def test_first_quality_line_may_start_with_at_sign() -> None:
    records = list(_fastq_parser("@r1\nAC\n+\n@I\n@r2\nG\n+\n@\n"))
    assert [r.quality for r in records] == [[31, 40], [31]]


def test_missing_header_reports_first_position() -> None:
    with pytest.raises(ParseError) as excinfo:
        list(_fastq_parser("ACGT\n"))
    error = excinfo.value
    assert error.message == "malformed file"
    assert (error.position.line, error.position.column) == (0, 1)
    assert "line: 1, column: 1" in str(error)


def test_missing_header_after_whitespace() -> None:
    with pytest.raises(ParseError) as excinfo:
        list(_fastq_parser("\n  X\n"))
    assert "line: 2, column: 3" in str(excinfo.value)


@pytest.mark.parametrize(
    "text, message",
    [
        ("@\nACGT\n+\nIIII\n", "missing ID"),
        ("@r1\n+\nII\n", "missing sequence"),
        ("@r1\nACGT\n", "missing quality scores"),
        ("@r1\nACGT\n+\n", "missing quality scores"),
    ],
)
def test_structural_errors(text: str, message: str) -> None:
    with pytest.raises(ParseError, match=message):
        list(_fastq_parser(text))


@pytest.mark.parametrize("token", ["x1", "1_0", "+5", "3.5"])
def test_invalid_quality_token(token: str) -> None:
    with pytest.raises(ParseError, match=f"invalid quality score '{re.escape(token)}'"):
        list(_paired_parser(">r1\nAC\n", f">r1\n30 {token}\n"))


def test_negative_quality_score_is_accepted() -> None:
    records = list(_paired_parser(">r1\nAC\n", ">r1\n-1 30\n"))
    assert records[0].quality == [-1, 30]


def test_quality_file_ending_early() -> None:
    parser = _paired_parser(">r1\nAC\n>r2\nGG\n", ">r1\n30 30\n")
    with pytest.raises(ParseError, match="quality file ended before sequence file"):
        list(parser)


def test_quality_file_with_extra_records() -> None:
    parser = _paired_parser(">r1\nAC\n", ">r1\n30 30\n>r2\n1 1\n")
    with pytest.raises(ParseError, match="more records than sequence file"):
        list(parser)


def test_fasta_requires_quality_companion() -> None:
    with pytest.raises(ValueError):
        RecordParser(TokenReader(io.StringIO(">r1\nAC\n"), "x.fasta"), FileKind.FASTA)


def test_open_missing_file(tmp_path: Path) -> None:
    missing = tmp_path / "missing.fastq"
    with pytest.raises(InputFileError) as excinfo:
        RecordParser.open_fastq(missing)
    assert excinfo.value.path == missing
    assert "failed to open the FASTQ file" in str(excinfo.value)


def test_open_files_from_disk(tmp_path: Path) -> None:
    fastq = tmp_path / "reads.fastq.gz"
    with gzip.open(fastq, "wt", encoding="utf-8") as handle:
        handle.write("@r1\r\nACGT\r\n+\r\nIIII\r\n")
    with RecordParser.open_fastq(fastq) as parser:
        records = list(parser)
    assert records[0].identifier == "r1"
    assert records[0].quality == [40] * 4

    fasta = tmp_path / "reads.fasta"
    qual = tmp_path / "reads.qual"
    fasta.write_text(">r1\nACG\n", encoding="utf-8")
    qual.write_text(">r1\n1 2 3\n", encoding="utf-8")
    with RecordParser.open_fasta_qual(fasta, qual) as parser:
        assert parser.kind is FileKind.FASTA
        assert [r.quality for r in parser] == [[1, 2, 3]]
