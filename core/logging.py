"""
Logging setup utility

Shared logging configuration for the web process and the scripts.
- Console: INFO level
- File: INFO level (TimedRotatingFileHandler, daily)

Usage:
    from core.logging import setup_logging
    setup_logging("web")
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Paths


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7  # keep at most 7 days of files

# Loggers that flood the output (raised to WARNING)
NOISY_LOGGERS = [
    "aiosqlite",       # executing/completed line for every query
    "httpcore",
    "httpx",
    "asyncio",
    "uvicorn.access",  # one line per request
]


def setup_logging(
    process_name: str,
    console_level: int = logging.INFO,
    file_level: int = logging.INFO,
    log_dir: Path | None = None,
) -> logging.Logger:
    """Initialize logging

    Writes to the console and to a daily rolling file under the
    process log directory.

    Args:
        process_name: process name ("web" or a script name)
        console_level: console log level (default INFO)
        file_level: file log level (default INFO)
        log_dir: log directory override (default depends on process_name)

    Returns:
        the configured root Logger
    """
    if log_dir is None:
        log_dir = get_log_file_path(process_name).parent

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{process_name}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # handlers do the filtering

    # Drop existing handlers (avoid duplicates on re-init)
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # 1. Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # 2. File handler (daily rotation)
    file_handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        interval=1,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.suffix = "%Y-%m-%d"  # web.log.2026-10-19
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # 3. Quiet the chatty libraries
    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.info(f"Logging initialized: {process_name}")
    root_logger.info(f"  - console: {logging.getLevelName(console_level)}")
    root_logger.info(f"  - file: {log_file} ({logging.getLevelName(file_level)}, daily rotation)")

    return root_logger


def get_log_file_path(process_name: str) -> Path:
    """Return the log file path

    Args:
        process_name: process name

    Returns:
        log file Path
    """
    if process_name == "web":
        return Paths.WEB_LOGS_DIR / f"{process_name}.log"
    return Paths.LOGS_DIR / f"{process_name}.log"
