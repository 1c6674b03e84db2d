"""
Logging for the inventory service

Console output is coloured by level; the same records go to a daily
application log, and errors additionally to a daily error log, under LOG_DIR.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are only interesting when something goes wrong
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite")


class ColoredFormatter(logging.Formatter):
    """Level name coloured with ANSI codes"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        # File handlers share the record; colour a copy
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _daily_file_handler(log_path: Path, prefix: str, level: int) -> logging.FileHandler:
    today = datetime.now().strftime("%Y-%m-%d")
    handler = logging.FileHandler(log_path / f"{prefix}_{today}.log", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def setup_logging(log_level: str = "INFO", log_dir: str = "logs"):
    """
    Install the console and daily file handlers on the root logger

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_dir: directory for inventory_YYYY-MM-DD.log and error_YYYY-MM-DD.log
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, DATE_FORMAT))
    root_logger.addHandler(console_handler)

    root_logger.addHandler(_daily_file_handler(log_path, "inventory", logging.INFO))
    root_logger.addHandler(_daily_file_handler(log_path, "error", logging.ERROR))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(f"Logging to {log_path.resolve()} at level {log_level.upper()}")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
