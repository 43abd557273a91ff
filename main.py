#!/usr/bin/env python
"""
Development entrypoint: `python main.py` or the `printdrop` console script.

Serves the print and transfer API with Flask's threaded server on the local
network. Use web/wsgi.py behind gunicorn for production.
"""
import argparse
import logging
from pathlib import Path

from config import VERSION, get_config
from logging_config import get_logger, setup_logging
from web.app import create_app

logger = get_logger(__name__)


def parse_args(argv=None):
    config = get_config()
    parser = argparse.ArgumentParser(description="LAN print and file transfer server")
    parser.add_argument("--host", default=config.HOST)
    parser.add_argument("--port", type=int, default=config.PORT)
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    parser.add_argument("--no-file-log", action="store_true", help="log to the console only")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config = get_config()

    setup_logging(
        log_level=logging.getLevelName(args.log_level.upper()),
        log_dir=Path(config.LOG_DIR),
        enable_file_logging=config.LOG_TO_FILE and not args.no_file_log,
    )

    app = create_app()
    logger.info("printdrop %s serving on http://%s:%d", VERSION, args.host, args.port)
    logger.info("Upload folder: %s", app.config["UPLOAD_FOLDER"])
    logger.info("Transfer folder: %s", app.config["TRANSFER_FOLDER"])

    try:
        app.run(host=args.host, port=args.port, threaded=True, use_reloader=False)
    finally:
        app.sweeper.stop()


if __name__ == "__main__":
    main()
