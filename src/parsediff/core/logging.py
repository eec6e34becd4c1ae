"""Logging configuration for parsediff.

Every module logs through a child of the ``parsediff`` logger. Records go to
stderr, so they never mix with json or markdown reports written to stdout,
and optionally to a log file.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "parsediff"

# Per-fixture outcomes are logged at DEBUG, run summaries at INFO
DEFAULT_LEVEL = logging.WARNING

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def level_for_verbosity(verbose: int) -> int:
    """Map a count of ``-v`` flags to a level: none WARNING, one INFO, more DEBUG."""
    if verbose <= 0:
        return DEFAULT_LEVEL
    return logging.INFO if verbose == 1 else logging.DEBUG


def configure_logging(
    level: int = DEFAULT_LEVEL,
    log_file: Optional[Path] = None,
    console: bool = True,
) -> None:
    """(Re)configure the ``parsediff`` logger.

    Handlers from an earlier call are replaced, not stacked.

    Args:
        level: Threshold for the logger and all of its handlers
        log_file: Also write records here; parent directories are created
        console: Write records to stderr
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    handlers: list[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Host applications keep their own root handlers out of our output
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, e.g. ``get_logger(__name__)``."""
    return logging.getLogger(name)


configure_logging()
