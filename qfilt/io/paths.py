"""Utility helpers for interacting with the filesystem."""

from __future__ import annotations

import gzip
import json
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, TextIO

from ..errors import InputFileError

# Reads are byte-oriented; latin-1 maps every byte to one character.
INPUT_ENCODING = "latin-1"


def open_input(path: Path | str, kind: str) -> TextIO:
    """Open an input file for reading, transparently handling ``.gz``."""

    path = Path(path)
    try:
        if path.suffix == ".gz":
            return gzip.open(path, "rt", encoding=INPUT_ENCODING, newline="")
        return path.open("r", encoding=INPUT_ENCODING, newline="")
    except OSError as exc:
        raise InputFileError(kind, path) from exc


@contextmanager
def open_output(path: Path | str | None) -> Iterator[TextIO]:
    """Yield a writable handle; ``None`` or ``-`` selects stdout."""

    if path is None or str(path) == "-":
        yield sys.stdout
        sys.stdout.flush()
        return
    path = Path(path)
    try:
        handle = path.open("w", encoding=INPUT_ENCODING, newline="\n")
    except OSError as exc:
        raise InputFileError("OUTPUT", path) from exc
    with handle:
        yield handle


def write_json(path: Path, obj: Any) -> None:
    """Write data as JSON with UTF-8 encoding."""

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(obj, handle, indent=2)


def now_iso() -> str:
    """Return current UTC timestamp as ISO string."""

    return datetime.now(timezone.utc).isoformat()
