"""
WSGI entrypoint for production (gunicorn/systemd).

This module should have no side effects beyond configuring logging and creating the
Flask app (which starts the transfer sweeper).
"""
import logging
from pathlib import Path

from config import get_config
from logging_config import setup_logging
from web.app import create_app

_config = get_config()
setup_logging(
    log_level=logging.getLevelName(_config.LOG_LEVEL.upper()),
    log_dir=Path(_config.LOG_DIR),
    enable_file_logging=_config.LOG_TO_FILE,
)

app = create_app()
