"""Logging configuration for the appointment reminders daemon."""

import logging
import sys
from datetime import datetime
from pathlib import Path

LOGGER_NAME = "appointment_reminders"

logger = logging.getLogger(LOGGER_NAME)


def setup_logging(debug: bool = False, log_dir: Path | str | None = None) -> logging.Logger:
    """Set up logging to the console and, optionally, a dated log file.

    Args:
        debug: Log at DEBUG instead of INFO
        log_dir: Directory for dated log files (no file logging if None)

    Returns:
        The configured application logger
    """
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)
    logger.propagate = False

    # Clear any existing handlers
    logger.handlers.clear()

    # Console handler - a daemon's stdout/stderr usually goes to the journal
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    # File handler - dated log file
    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"{datetime.now().strftime('%Y-%m-%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger
