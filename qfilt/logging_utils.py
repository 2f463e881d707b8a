"""Logging helpers for the qfilt CLI.

Log records, including the end-of-run report, go to stderr so fragments can
be streamed to stdout.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "qfilt"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configure root logger and return the package logger.

    ``verbose`` adds per-read debug lines; ``quiet`` keeps only warnings and
    errors, which silences the run report.
    """

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or one of its children."""

    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
