"""Logger configuration for ellu-dl."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from .constants import DATE_FORMAT, FILE_LOG_FORMAT, LOG_FORMAT


ROOT_LOGGER = "ElluDL"


def get_valid_log_levels() -> list[str]:
    """Return a list of valid log level names."""
    return ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def setup_logger(
    name: str = ROOT_LOGGER,
    level: str = "INFO",
    log_file: str | Path | None = None,
    show_path: bool = False,
) -> logging.Logger:
    """
    Set up the application logger.

    Logs go to ``log_file`` when one is given, otherwise to stderr through a
    Rich handler so they do not interleave with progress output on stdout.

    Args:
        name: Logger name
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a log file (created if missing)
        show_path: Show file path in console logs

    Returns:
        Configured logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=DATE_FORMAT))
    else:
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=show_path,
            rich_tracebacks=True,
            markup=False,
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(numeric_level)

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    # Drop handlers from a previous setup to avoid duplicate lines
    for old in logger.handlers[:]:
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Get an existing logger or create a new one if it doesn't exist.

    Args:
        name: The name of the logger

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
