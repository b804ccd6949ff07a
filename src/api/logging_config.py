"""
Review Data API Logging Configuration
=====================================

Configures logging for the API with support for:
- JSON structured output (for production / log aggregation)
- Human-readable output (for development)
- File rotation
- Request context (path, status, review_id, count, duration) passed via
  ``extra=`` on both formats

Usage:
    from src.api.logging_config import setup_logging

    setup_logging(json_output=True, log_file="logs/api.log")
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from typing import Optional

EXTRA_FIELDS = ("path", "status", "review_id", "count", "duration")


def record_extras(record: logging.LogRecord) -> dict:
    """Request/review context attached through ``extra=`` (path, status, review_id, ...)."""
    extras = {}
    for key in EXTRA_FIELDS:
        val = getattr(record, key, None)
        if val is not None:
            extras[key] = val
    return extras


class ConsoleFormatter(logging.Formatter):
    """Human-readable lines with the request context appended as key=value pairs."""

    def __init__(self):
        super().__init__(
            "%(asctime)s [%(levelname)-8s] %(name)-25s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = record_extras(record)
        if extras:
            line += " | " + " ".join(f"{k}={v}" for k, v in extras.items())
        return line


class JSONFormatter(logging.Formatter):
    """
    Formats log records as JSON lines.

    Output format:
        {"ts": "2025-...", "level": "INFO", "logger": "src.data", "msg": "...", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        log_entry.update(record_extras(record))

        return json.dumps(log_entry, default=str)


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
):
    """
    Configure application logging.

    Args:
        level: Root log level (DEBUG, INFO, WARNING, ERROR)
        json_output: Use JSON structured format
        log_file: Optional file path for log output (with rotation)
        max_bytes: Max file size before rotation
        backup_count: Number of rotated files to keep
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Clear existing handlers
    root.handlers.clear()

    if json_output:
        formatter = JSONFormatter()
    else:
        formatter = ConsoleFormatter()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    root.info(
        "Logging configured: level=%s json=%s file=%s",
        level, json_output, log_file or "none",
    )


def setup_logging_from_settings():
    """Configure logging from LOG_LEVEL / LOG_JSON / LOG_FILE."""
    from ..data.config import get_settings

    config = get_settings().logging
    setup_logging(level=config.level, json_output=config.json_logs, log_file=config.log_file)
