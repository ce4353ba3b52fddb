"""Logging configuration: rich console output plus an optional rotating file."""

from __future__ import annotations

import logging
import warnings
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.logging import RichHandler

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 3

# Audits log from worker threads, so file lines carry the thread name
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_level: str, log_file: Path | None = None) -> None:
    """Configure the root logger for a command run.

    Args:
        log_level: Logging level name (e.g. "INFO", "DEBUG"). Unknown names
            fall back to INFO.
        log_file: Where the rotating log is written. Parent directories are
            created. When None, only the console handler is installed.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    # Python warnings go through logging so they follow the level too
    logging.captureWarnings(True)
    if level > logging.WARNING:
        warnings.filterwarnings("ignore")

    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()

    console = RichHandler(level=level, rich_tracebacks=True, show_path=False)
    console.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(console)

    if log_file is None:
        return

    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
    root.addHandler(file_handler)
