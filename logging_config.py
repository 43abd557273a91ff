"""
Logging configuration for printdrop.

Every request runs on its own thread and the sweep runs on another, so the
thread name is part of every log line.

Log Format:
    2026-10-19 10:15:30 [INFO    ] [MainThread] printdrop.main - Serving on 0.0.0.0:3000
    2026-10-19 10:15:31 [INFO    ] [Thread-4 (process_request_thread)] printdrop.printing.ledger - Job ... is now printing
    2026-10-19 11:15:30 [INFO    ] [TransferSweep] printdrop.transfer.store - Swept expired transfer 123456

Usage:
    # At process startup (main.py / web/wsgi.py)
    setup_logging(log_level=logging.INFO, log_dir=Path("logs"))

    # In modules
    logger = get_logger(__name__)
"""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

APP_LOGGER_NAME = "printdrop"

LOG_FORMAT = "%(asctime)s [%(levelname)-8s] [%(thread_name)s] %(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5


class ThreadContextFilter(logging.Filter):
    """Adds `thread_name` to each record for the format string."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.thread_name = threading.current_thread().name
        return True


def setup_logging(
    log_level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = True,
) -> logging.Logger:
    """
    Configure the application logger.

    Sets up a console handler and, when `enable_file_logging` is set, a rotating
    application log plus a separate rotating error log (ERROR and above).

    Args:
        log_level: Minimum level for all handlers
        log_dir: Directory for log files (default: ./logs next to this file)
        enable_file_logging: Whether to write log files at all

    Returns:
        The configured "printdrop" logger
    """
    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False

    # Allows re-configuration
    logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    thread_filter = ThreadContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(thread_filter)
    logger.addHandler(console_handler)

    if enable_file_logging:
        if log_dir is None:
            log_dir = Path(__file__).parent / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        app_log_file = log_dir / f"{APP_LOGGER_NAME}.log"
        file_handler = RotatingFileHandler(
            filename=app_log_file,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(thread_filter)
        logger.addHandler(file_handler)

        error_handler = RotatingFileHandler(
            filename=log_dir / f"{APP_LOGGER_NAME}_error.log",
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        error_handler.addFilter(thread_filter)
        logger.addHandler(error_handler)

        logger.info(f"File logging enabled: {app_log_file}")

    logger.info(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger under the "printdrop" namespace.

    "printing.ledger" becomes "printdrop.printing.ledger", so it inherits the
    handlers installed by setup_logging().
    """
    if not name.startswith(APP_LOGGER_NAME):
        name = f"{APP_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
