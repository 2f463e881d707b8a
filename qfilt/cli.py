"""Command-line interface for qfilt."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import TRIM_DEFAULTS, TrimDefaults, collect_runtime_defaults
from .errors import QfiltError
from .filters.quality import MODE_AMBIGUOUS, MODE_HOMOPOLYMERS, MODE_SPLIT, TrimPolicy
from .io.writers import OUTPUT_FORMATS
from .logging_utils import configure_logging, get_logger
from .runner import TrimRequest, run_trim


def build_parser(defaults: TrimDefaults = TRIM_DEFAULTS) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qfilt",
        description="Trim and fragment sequencing reads by per-base quality score.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors (suppresses the run report).",
    )

    inputs = parser.add_mutually_exclusive_group(required=True)
    inputs.add_argument(
        "-F",
        "--fasta-qual",
        nargs=2,
        type=Path,
        metavar=("FASTA", "QUAL"),
        help="FASTA file and its QUAL file of whitespace-separated integer scores.",
    )
    inputs.add_argument(
        "-Q",
        "--fastq",
        type=Path,
        metavar="FASTQ",
        help="FASTQ file (Phred+33 qualities).",
    )

    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output file for retained fragments (default: stdout, or '-').",
    )
    parser.add_argument(
        "-q",
        "--min-qscore",
        type=int,
        default=defaults.min_quality,
        help=f"Minimum per-base quality score (default: {defaults.min_quality}).",
    )
    parser.add_argument(
        "-l",
        "--min-length",
        type=int,
        default=defaults.min_length,
        help=f"Minimum retained fragment length (default: {defaults.min_length}).",
    )
    parser.add_argument(
        "-m",
        "--mode",
        type=int,
        default=0,
        help="Run mode bit mask: 1 split, 2 tolerate homopolymers, 4 tolerate ambigs (default: 0).",
    )
    parser.add_argument(
        "-s",
        "--split",
        action="store_true",
        help="Keep every acceptable fragment instead of truncating at the first one.",
    )
    parser.add_argument(
        "-p",
        "--homopolymers",
        action="store_true",
        help="Tolerate low-quality bases that extend a homopolymer run.",
    )
    parser.add_argument(
        "-a",
        "--ambiguous",
        action="store_true",
        help="Tolerate low-quality 'N' bases; they do not count towards the length.",
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="output_format",
        type=str.lower,
        choices=OUTPUT_FORMATS,
        default=defaults.output_format,
        help=f"Output format (default: {defaults.output_format}).",
    )
    parser.add_argument(
        "-t",
        "--tag",
        default="",
        help="5' tag each read must start with; matching reads are trimmed past it.",
    )
    parser.add_argument(
        "-T",
        "--tag-mismatch",
        type=int,
        default=defaults.tag_mismatches,
        help=f"Mismatches tolerated against the tag (default: {defaults.tag_mismatches}).",
    )
    parser.add_argument(
        "--report-json",
        type=Path,
        help="Also write the run summary as JSON to this path.",
    )
    return parser


def _handle_trim(args: argparse.Namespace) -> int:
    mode = args.mode
    if args.split:
        mode |= MODE_SPLIT
    if args.homopolymers:
        mode |= MODE_HOMOPOLYMERS
    if args.ambiguous:
        mode |= MODE_AMBIGUOUS
    policy = TrimPolicy.from_mode(
        mode,
        min_quality=args.min_qscore,
        min_length=args.min_length,
        tag=args.tag,
        tag_mismatches=args.tag_mismatch,
    )
    fasta, qual = args.fasta_qual if args.fasta_qual else (None, None)
    request = TrimRequest(
        policy=policy,
        fastq=args.fastq,
        fasta=fasta,
        qual=qual,
        output=args.output,
        output_format=args.output_format,
        report_json=args.report_json,
    )
    result = run_trim(request, get_logger())
    if result.output_path is not None:
        get_logger().info("Retained fragments -> %s", result.output_path)
    return 0


def main(argv: list[str] | None = None) -> int:
    try:
        defaults = collect_runtime_defaults()
    except ValueError as exc:
        configure_logging()
        get_logger().error(str(exc))
        return 1

    parser = build_parser(defaults)
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)
    logger = get_logger()

    try:
        return _handle_trim(args)
    except (QfiltError, ValueError) as exc:
        logger.error(str(exc))
        return 1
    except Exception:  # pragma: no cover - safety net
        logger.exception("Unexpected error")
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
