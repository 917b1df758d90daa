"""
Per-run booking log file.

Every run writes to logs/booking_<timestamp>.log; the file rotates once it
reaches MAX_BOOKING_LOG_SIZE_MB.
"""

import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Tuple

from config import Config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _existing_log_file(logger: logging.Logger) -> Optional[Path]:
    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler):
            return Path(handler.baseFilename)
    return None


def setup_file_logger(
    name: str = "deskbot",
    logs_dir: Optional[Path] = None,
    max_bytes: Optional[int] = None,
    backup_count: Optional[int] = None,
    prefix: str = "booking"
) -> Tuple[logging.Logger, Optional[Path]]:
    """
    Attach a rotating booking log file to the named logger.

    Calling it again for a logger that already has handlers reuses them.

    Args:
        name: Logger name (child loggers such as deskbot.api write here too)
        logs_dir: Directory for log files (default: Config.LOGS_DIR)
        max_bytes: Rotation size (default: Config.MAX_BOOKING_LOG_SIZE_MB)
        backup_count: Rotated files to keep (default: Config.LOG_BACKUP_COUNT)
        prefix: File name prefix

    Returns:
        Tuple of (logger instance, log file path)
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    if logger.handlers:
        return logger, _existing_log_file(logger)

    logs_dir = Path(logs_dir or Config.LOGS_DIR)
    if max_bytes is None:
        max_bytes = Config.MAX_BOOKING_LOG_SIZE_MB * 1024 * 1024
    if backup_count is None:
        backup_count = Config.LOG_BACKUP_COUNT

    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / f"{prefix}_{datetime.now():%Y%m%d_%H%M%S}.log"

    handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    # Console output goes through the reporter
    logger.addHandler(handler)
    logger.propagate = False

    logger.debug(f"Booking log: {log_file} (rotates at {max_bytes} bytes, keeps {backup_count})")
    return logger, log_file
