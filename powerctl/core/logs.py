"""
Logging setup: colored console output plus a plain log file.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from powerctl.core import paths

FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name when writing to a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, *args, use_colors: bool | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.use_colors = sys.stderr.isatty() if use_colors is None else use_colors

    def format(self, record):
        if not self.use_colors:
            return super().format(record)

        original = record.levelname
        record.levelname = f"{self.COLORS.get(original, '')}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        verbose: DEBUG level when True, INFO otherwise
        log_file: Log file path (default: paths.LOG_FILE)

    Returns:
        The root logger
    """
    log = logging.getLogger()
    log.setLevel(logging.DEBUG if verbose else logging.INFO)
    log.handlers = []

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(ColoredFormatter("%(levelname)s %(message)s"))
    # Console only shows problems unless asked for more
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    log.addHandler(console)

    log_file = log_file or paths.LOG_FILE
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
    except OSError as e:
        log.warning("Cannot write log file %s: %s", log_file, e)
    else:
        file_handler.setFormatter(logging.Formatter(FORMAT))
        log.addHandler(file_handler)

    return log
