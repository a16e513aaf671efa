"""Shared helpers for configuring the application's logging setup."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import IO, Optional, Tuple

from config.constants import BRAND_NAME


LOG_FORMAT = "%(transaction)s%(asctime)s - %(levelname)s - %(threadName)s - %(message)s"
LOG_FILENAME = "texclipper.log"
LOG_SUBDIRECTORY = "Logs"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3


class TransactionTagFilter(logging.Filter):
    """Ensure every record exposes a ``transaction`` attribute.

    Clipboard transactions pass ``extra={"transaction": "[revert#3] "}`` so
    their lines can be grouped; everything else gets the default tag.
    """

    def __init__(self, default_tag: str = "") -> None:
        super().__init__()
        self._default_tag = default_tag

    def filter(self, record: logging.LogRecord) -> bool:
        current = getattr(record, "transaction", None)
        if not current:
            record.transaction = self._default_tag
        return True


def _create_formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT)


def create_stream_handler(stream: IO[str], *, default_tag: str = "") -> logging.Handler:
    """Create the console handler with the transaction filter applied."""

    handler = logging.StreamHandler(stream)
    handler.setFormatter(_create_formatter())
    handler.addFilter(TransactionTagFilter(default_tag))
    return handler


def create_file_handler(log_file_path: str, *, default_tag: str = "") -> RotatingFileHandler:
    """Return a rotating file handler writing to *log_file_path*."""

    os.makedirs(os.path.dirname(log_file_path), exist_ok=True)
    handler = RotatingFileHandler(
        log_file_path,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(_create_formatter())
    handler.addFilter(TransactionTagFilter(default_tag))
    return handler


def ensure_file_handler(log_file_path: str, *, default_tag: str = "") -> RotatingFileHandler:
    """Attach a file handler to the root logger if one is not attached yet."""

    absolute_path = os.path.abspath(log_file_path)
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if isinstance(handler, RotatingFileHandler):
            if os.path.abspath(getattr(handler, "baseFilename", "")) == absolute_path:
                return handler

    handler = create_file_handler(absolute_path, default_tag=default_tag)
    root_logger.addHandler(handler)
    return handler


def resolve_log_paths(documents_dir: Path) -> Tuple[str, str]:
    """Return the log directory and log file path."""

    log_dir = os.path.join(str(documents_dir), BRAND_NAME, LOG_SUBDIRECTORY)
    log_file_path = os.path.join(log_dir, LOG_FILENAME)
    return log_dir, log_file_path


def parse_level(name: Optional[str], default: int = logging.INFO) -> int:
    """Translate a level name from ``settings.ini`` into a logging level."""

    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default
