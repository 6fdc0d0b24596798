"""
Structured logger with JSON output and file support.

Wraps a stdlib ``logging.Logger`` so that keyword arguments become record
attributes, rendered as ``key=value`` pairs in text mode or as JSON keys.
"""

import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from .interface import Logger

# LogRecord attributes that are never treated as structured fields
_RESERVED_KEYS = frozenset({
    "args", "asctime", "created", "exc_info", "exc_text", "filename",
    "funcName", "levelname", "levelno", "lineno", "module",
    "msecs", "message", "msg", "name", "pathname", "process",
    "processName", "relativeCreated", "stack_info", "thread",
    "threadName", "taskName",
})


def _extra_fields(record: logging.LogRecord) -> dict:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_KEYS and key != "run_id"
    }


class JsonFormatter(logging.Formatter):
    """Format records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        run_id = getattr(record, "run_id", None)
        if run_id:
            log_data["run_id"] = str(run_id)

        for key, value in _extra_fields(record).items():
            log_data[key] = value if isinstance(value, (int, float, bool)) else str(value)

        return json.dumps(log_data)


class TextFormatter(logging.Formatter):
    """Text formatter that appends structured fields to the message."""

    def format(self, record: logging.LogRecord) -> str:
        s = super().format(record)

        extra_args = _extra_fields(record)
        if extra_args:
            s += " " + " ".join(f"{k}={v}" for k, v in extra_args.items())

        return s


class StructuredLogger(Logger):
    """Logger implementation with text/JSON output and optional file handler.

    Example:
        logger = StructuredLogger(name="dbdump")
        logger.info("Upload complete", target="postgres://u@db1:5432/app", key="app_1700000000.pgdump.zst")
    """

    def __init__(
        self,
        name: str = "dbdump",
        level: int = logging.INFO,
        log_file: Optional[str] = None,
        json_format: bool = False,
    ):
        """Initialize the structured logger.

        Args:
            name: Logger name
            level: Logging level (logging.DEBUG, logging.INFO, etc.)
            log_file: Optional file path for log output
            json_format: If True, output logs as JSON; otherwise use text format
        """
        self._name = name
        self._run_id = str(uuid.uuid4())[:8]
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)

        # Clear existing handlers to avoid duplication if re-initialized
        if self._logger.hasHandlers():
            self._logger.handlers.clear()

        self._logger.propagate = False

        if json_format:
            formatter: logging.Formatter = JsonFormatter()
        else:
            formatter = TextFormatter(
                "%(asctime)s [%(levelname)s] [%(name)s] [run:%(run_id)s] %(message)s"
            )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        self._logger.addHandler(console_handler)

        if log_file:
            try:
                file_handler = logging.FileHandler(log_file)
                file_handler.setFormatter(formatter)
                self._logger.addHandler(file_handler)
            except OSError as e:
                # Fallback to console if file cannot be opened
                print(f"Failed to setup log file {log_file}: {e}", file=sys.stderr)

    @property
    def name(self) -> str:
        return self._name

    def get_run_id(self) -> str:
        return self._run_id

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        extra = {"run_id": self._run_id}

        for k, v in kwargs.items():
            if k in _RESERVED_KEYS or k == "run_id":
                # Prefix reserved keys to preserve them but avoid collision
                extra[f"_{k}"] = v
            else:
                extra[k] = v

        self._logger.log(level, message, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, **kwargs)
