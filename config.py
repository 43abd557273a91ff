"""
Configuration for printdrop.

Values come from the environment (a .env file next to this module is loaded
first). Sizes are in bytes, durations in seconds.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Must run before the Config class body reads os.environ
load_dotenv()

VERSION = "2.0.0"

BASE_DIR = Path(__file__).resolve().parent

MIB = 1024 * 1024
GIB = 1024 * MIB


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, default))


class Config:
    """Default configuration for the Flask application."""

    HOST = os.environ.get("PRINTDROP_HOST", "0.0.0.0")
    PORT = _env_int("PRINTDROP_PORT", 3000)
    DEBUG = os.environ.get("FLASK_DEBUG", "0") == "1"
    TESTING = False

    # Storage
    UPLOAD_FOLDER = os.environ.get("PRINTDROP_UPLOAD_FOLDER", str(BASE_DIR / "uploads"))
    TRANSFER_FOLDER = os.environ.get("PRINTDROP_TRANSFER_FOLDER", str(BASE_DIR / "transfers"))

    # Logging
    LOG_DIR = os.environ.get("PRINTDROP_LOG_DIR", str(BASE_DIR / "logs"))
    LOG_LEVEL = os.environ.get("PRINTDROP_LOG_LEVEL", "INFO")
    LOG_TO_FILE = os.environ.get("PRINTDROP_LOG_TO_FILE", "1") == "1"

    # External tools (empty SOFFICE_PATH means probe the usual install locations)
    SOFFICE_PATH = os.environ.get("PRINTDROP_SOFFICE_PATH", "")
    LP_PATH = os.environ.get("PRINTDROP_LP_PATH", "lp")
    LPSTAT_PATH = os.environ.get("PRINTDROP_LPSTAT_PATH", "lpstat")

    # Printing
    CONVERSION_TIMEOUT = _env_int("PRINTDROP_CONVERSION_TIMEOUT", 60)
    PRINT_CLEANUP_DELAY = float(os.environ.get("PRINTDROP_PRINT_CLEANUP_DELAY", "5"))
    PRINT_MAX_FILE_SIZE = _env_int("PRINTDROP_PRINT_MAX_FILE_SIZE", 50 * MIB)
    QUEUE_VIEW_LIMIT = _env_int("PRINTDROP_QUEUE_VIEW_LIMIT", 50)

    # Transfers
    TRANSFER_MAX_FILE_SIZE = _env_int("PRINTDROP_TRANSFER_MAX_FILE_SIZE", 100 * MIB)
    TRANSFER_MAX_BATCH_SIZE = _env_int("PRINTDROP_TRANSFER_MAX_BATCH_SIZE", 10 * GIB)
    TRANSFER_MAX_AGE = _env_int("PRINTDROP_TRANSFER_MAX_AGE", 24 * 60 * 60)
    TRANSFER_SWEEP_INTERVAL = _env_int("PRINTDROP_TRANSFER_SWEEP_INTERVAL", 60 * 60)
    TRANSFER_SWEEP_ENABLED = True
    QR_SIZE = _env_int("PRINTDROP_QR_SIZE", 256)

    # Werkzeug rejects bodies above this before any route runs
    MAX_CONTENT_LENGTH = TRANSFER_MAX_BATCH_SIZE + 16 * MIB


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False
    LOG_TO_FILE = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    LOG_TO_FILE = False
    PRINT_CLEANUP_DELAY = 0
    TRANSFER_SWEEP_ENABLED = False


CONFIGS = {
    "production": ProductionConfig,
    "development": DevelopmentConfig,
    "testing": TestingConfig,
}


def get_config(name: str | None = None) -> type[Config]:
    name = name or os.environ.get("PRINTDROP_ENV", "production")
    return CONFIGS.get(name, ProductionConfig)
