"""Structured logging for music-bridge.

Records go to a rotating JSON file (logs/music_bridge.log) for later
inspection and to stdout in plain text. Credential fields passed as
structured context are masked before any handler sees them.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from pythonjsonlogger import jsonlogger

LOG_FILE_NAME = "music_bridge.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

REDACTED = "***REDACTED***"

# Context keys that must never reach a log sink
SENSITIVE_FIELDS = frozenset(
    {
        "access_token",
        "refresh_token",
        "device_code",
        "client_secret",
        "authorization",
    }
)

# httpx request logging is handled by the client event hooks
LIBRARY_LOG_LEVELS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


class SensitiveFieldFilter(logging.Filter):
    """Mask credential values attached to a record via ``extra``."""

    def filter(self, record: logging.LogRecord) -> bool:
        for field in SENSITIVE_FIELDS:
            if getattr(record, field, None):
                setattr(record, field, REDACTED)
        return True


def setup_logging(log_level: str = "INFO", log_dir: Path | None = None) -> logging.Logger:
    """Install the JSON file handler and the console handler on the root logger.

    Args:
        log_level: Console and root level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the JSON log (defaults to <repo>/logs)

    Returns:
        The root logger
    """
    level = getattr(logging, log_level.upper())
    log_dir = log_dir or Path(__file__).parent.parent / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    secret_filter = SensitiveFieldFilter()

    file_handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(module)s %(funcName)s",
            timestamp=True,
        )
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.addFilter(secret_filter)
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s [%(name)s] %(message)s", "%H:%M:%S"))
    console_handler.setLevel(level)
    console_handler.addFilter(secret_filter)
    root_logger.addHandler(console_handler)

    for name, library_level in LIBRARY_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(library_level)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **extra_fields: Any,
) -> None:
    """Emit ``message`` with structured context fields.

    Every call site passes an ``event_type`` so the JSON log can be filtered
    by event.

    Args:
        logger: Logger instance
        level: Method name on the logger (debug, info, warning, error, critical)
        message: Human-readable message
        **extra_fields: Context fields such as ``event_type``, ``provider`` or ``attempt``
    """
    getattr(logger, level.lower())(message, extra=extra_fields)
