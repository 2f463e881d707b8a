"""Central location for default settings and their environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import find_dotenv, load_dotenv

ENVIRONMENT_VARIABLES = (
    "QFILT_MIN_QSCORE",
    "QFILT_MIN_LENGTH",
    "QFILT_FORMAT",
)

PathLike = Union[str, Path]


@dataclass(frozen=True, slots=True)
class TrimDefaults:
    """Default values for command-line arguments."""

    min_quality: int = 20
    min_length: int = 50
    output_format: str = "fasta"
    tag_mismatches: int = 0
    line_width: int = 60


TRIM_DEFAULTS = TrimDefaults()


def load_env_file(start_path: Optional[PathLike] = None) -> Optional[Path]:
    """Load the closest .env file without overriding pre-existing values."""

    if start_path is not None:
        candidate = _find_upwards(Path(start_path).resolve())
    else:
        found = find_dotenv(usecwd=True)
        candidate = Path(found) if found else None
    if candidate is None:
        return None
    load_dotenv(candidate, override=False)
    return candidate


def collect_runtime_defaults(
    start_path: Optional[PathLike] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> TrimDefaults:
    """Source the .env file and apply ``QFILT_*`` overrides to the defaults."""

    if environ is None:
        load_env_file(start_path)
        environ = os.environ
    defaults = TRIM_DEFAULTS
    if environ.get("QFILT_MIN_QSCORE"):
        defaults = replace(defaults, min_quality=_as_int(environ, "QFILT_MIN_QSCORE"))
    if environ.get("QFILT_MIN_LENGTH"):
        defaults = replace(defaults, min_length=_as_int(environ, "QFILT_MIN_LENGTH"))
    if environ.get("QFILT_FORMAT"):
        output_format = environ["QFILT_FORMAT"].strip().lower()
        if output_format not in {"fasta", "fastq"}:
            raise ValueError(f"QFILT_FORMAT must be 'fasta' or 'fastq', got {environ['QFILT_FORMAT']!r}")
        defaults = replace(defaults, output_format=output_format)
    return defaults


def _as_int(environ: Mapping[str, str], key: str) -> int:
    try:
        return int(environ[key])
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {environ[key]!r}") from None


def _find_upwards(start: Path) -> Optional[Path]:
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.exists():
            return candidate
    return None
