"""
Centralized logging configuration with structured logging support.
"""
import json
import logging
import logging.config
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

# Structured fields copied from ``extra=`` into JSON log entries
_EXTRA_FIELDS = (
    "provider",
    "model",
    "expected_count",
    "actual_count",
    "error_category",
    "status_code",
)


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for production logging.

    Produces structured log entries with consistent fields for log aggregation.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_entry: Dict[str, Any] = {
            "timestamp": timestamp.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        # Add source location for error-level logs
        if record.levelno >= logging.ERROR:
            log_entry["source"] = f"{record.pathname}:{record.lineno}"

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure application-wide logging.

    Args:
        log_level: Level name for the root and ``quizgen`` loggers
        log_file: Optional path of a file to log to in addition to stdout
        json_format: Emit JSON lines instead of the human-readable format
        stream: Console stream (default: stdout)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = "json" if json_format else "default"

    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": formatter,
            "stream": stream or sys.stdout,
        },
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "level": level,
            "formatter": formatter,
            "filename": log_file,
            "encoding": "utf-8",
        }

    logging_config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": JSONFormatter,
            },
        },
        "handlers": handlers,
        "root": {
            "level": level,
            "handlers": list(handlers),
        },
        "loggers": {
            "quizgen": {
                "level": level,
                "handlers": list(handlers),
                "propagate": False,
            },
            # SDK request logs are noisy at INFO
            "httpx": {"level": logging.WARNING},
            "uvicorn.access": {"level": logging.WARNING},
        },
    }

    logging.config.dictConfig(logging_config)
