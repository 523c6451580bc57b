"""Logging configuration for area-authz."""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = "{level.icon} {message}"
VERBOSE_FORMAT = "<dim>{time:HH:mm:ss}</dim> {level.icon} <cyan>{name}</cyan> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> None:
    """Send logs to stderr and, when ``log_file`` is given, to that file.

    Verbose mode lowers stderr to DEBUG and prefixes each line with the time
    and the emitting module. The file always records DEBUG and above.
    """
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG", format=VERBOSE_FORMAT)
    else:
        logger.add(sys.stderr, level="INFO", format=CONSOLE_FORMAT)
    if log_file is not None:
        logger.add(log_file, level="DEBUG", format=FILE_FORMAT, encoding="utf-8")
