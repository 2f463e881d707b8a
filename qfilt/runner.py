"""Run driver: parse every read, trim it and write the retained fragments."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from .config import TRIM_DEFAULTS
from .filters.quality import TrimPolicy, extract_fragments
from .io.parser import RecordParser
from .io.paths import now_iso, open_output, write_json
from .io.records import SequenceRecord
from .io.writers import OUTPUT_FORMATS, write_fragment
from .report import LengthStats, format_report


@dataclass(slots=True)
class TrimRequest:
    policy: TrimPolicy
    fastq: Path | None = None
    fasta: Path | None = None
    qual: Path | None = None
    output: Path | None = None
    output_format: str = TRIM_DEFAULTS.output_format
    line_width: int = TRIM_DEFAULTS.line_width
    report_json: Path | None = None


@dataclass(slots=True)
class TrimResult:
    total_reads: int
    contributing_reads: int
    retained_fragments: int
    read_stats: LengthStats
    fragment_stats: LengthStats
    output_path: Path | None
    report_path: Path | None


def run_trim(request: TrimRequest, logger) -> TrimResult:
    output_format = request.output_format.lower()
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported output format: {request.output_format}")

    read_lengths: List[int] = []
    fragment_lengths: List[int] = []
    contributing = 0
    record = SequenceRecord()

    with _open_parser(request) as parser, open_output(request.output) as out:
        while parser.next(record):
            read_lengths.append(record.length)
            fragments = extract_fragments(record, request.policy)
            if fragments:
                contributing += 1
            for index, fragment in enumerate(fragments):
                write_fragment(out, record, fragment, index, output_format, request.line_width)
                fragment_lengths.append(fragment.length)
            logger.debug("%s: length=%s fragments=%s", record.identifier, record.length, len(fragments))

    output_path = request.output if request.output is not None and str(request.output) != "-" else None
    result = TrimResult(
        total_reads=len(read_lengths),
        contributing_reads=contributing,
        retained_fragments=len(fragment_lengths),
        read_stats=LengthStats.from_lengths(read_lengths),
        fragment_stats=LengthStats.from_lengths(fragment_lengths),
        output_path=output_path,
        report_path=request.report_json,
    )

    for line in format_report(request, result):
        logger.info(line)
    if result.contributing_reads == 0:
        logger.warning("No reads contributed a fragment; output is empty.")
    if request.report_json is not None:
        write_json(request.report_json, _manifest(request, result))
        logger.info("Run report -> %s", request.report_json)
    return result


def _open_parser(request: TrimRequest) -> RecordParser:
    if request.fastq is not None:
        if request.fasta is not None or request.qual is not None:
            raise ValueError("Provide either a FASTQ file or a FASTA/QUAL pair, not both.")
        return RecordParser.open_fastq(request.fastq)
    if request.fasta is None or request.qual is None:
        raise ValueError("A FASTA input requires its QUAL companion.")
    return RecordParser.open_fasta_qual(request.fasta, request.qual)


def _manifest(request: TrimRequest, result: TrimResult) -> dict:
    policy = request.policy
    return {
        "timestamp": now_iso(),
        "inputs": {
            "fastq": str(request.fastq) if request.fastq else None,
            "fasta": str(request.fasta) if request.fasta else None,
            "qual": str(request.qual) if request.qual else None,
        },
        "outputs": {
            "fragments": str(result.output_path) if result.output_path else "-",
            "format": request.output_format.lower(),
        },
        "params": {
            "min_qscore": policy.min_quality,
            "min_length": policy.min_length,
            "mode": policy.mode,
            "split": policy.split,
            "homopolymers": policy.homopolymers,
            "ambiguous": policy.ambiguous,
            "tag": policy.tag or None,
            "tag_mismatches": policy.tag_mismatches,
        },
        "original_reads": result.total_reads,
        "contributing_reads": result.contributing_reads,
        "retained_fragments": result.retained_fragments,
        "read_lengths": result.read_stats.as_dict(),
        "fragment_lengths": result.fragment_stats.as_dict(),
    }
