"""Logging configuration for datadict-sync."""

import sys
from typing import TextIO

from loguru import logger


def configure_logging(*, verbose: bool = False, sink: TextIO | None = None) -> None:
    """Route loguru output to one sink, at DEBUG when verbose else INFO.

    The sink defaults to stderr so stdout stays clean for CLI output.
    """
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    fmt = "{level.icon} {name}: {message}" if verbose else "{level.icon} {message}"
    logger.add(sink or sys.stderr, level=level, format=fmt)
