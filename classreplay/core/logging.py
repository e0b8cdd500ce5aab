"""
Structured logging configuration

Every component logs through ``get_logger(__name__, component=...)``:
- JSON records for production and for log files
- Coloured, human-readable console lines for development
- Correlation fields (request, task, marker) carried by context variables
- ``LogTimer`` for timing pipeline stages
"""

import json
import logging
import os
import sys
import time
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

SENSITIVE_KEY_TOKENS = ("password", "secret", "token", "api_key", "apikey", "app_key", "authorization")

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
task_id_var: ContextVar[Optional[str]] = ContextVar("task_id", default=None)
marker_index_var: ContextVar[Optional[int]] = ContextVar("marker_index", default=None)

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def _context_fields() -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    request_id = request_id_var.get()
    if request_id:
        fields["request_id"] = request_id
    task_id = task_id_var.get()
    if task_id:
        fields["task_id"] = task_id
    marker_index = marker_index_var.get()
    if marker_index is not None:
        fields["marker_index"] = marker_index
    return fields


def _is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(token in lowered for token in SENSITIVE_KEY_TOKENS)


def redact(key: str, value: Any) -> Any:
    """Mask values stored under credential-like keys, recursively."""
    if isinstance(value, dict):
        return {
            child_key: "***REDACTED***" if _is_sensitive_key(str(child_key)) else redact(str(child_key), child_value)
            for child_key, child_value in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(redact(key, item) for item in value)
    if isinstance(value, str) and _is_sensitive_key(key):
        return "***REDACTED***"
    return value


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        payload.update(_context_fields())

        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_") and not callable(value)
            and key not in payload
        }
        if extra:
            payload["extra"] = redact("extra", extra)

        return json.dumps(payload, ensure_ascii=False, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Coloured single-line output for local runs."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]

        context_parts = []
        fields = _context_fields()
        if "request_id" in fields:
            context_parts.append(f"req:{fields['request_id'][:8]}")
        if "task_id" in fields:
            context_parts.append(f"task:{fields['task_id'][:8]}")
        if "marker_index" in fields:
            context_parts.append(f"marker:{fields['marker_index']}")
        context = f" [{', '.join(context_parts)}]" if context_parts else ""

        line = (
            f"{color}{timestamp}{self.RESET} "
            f"{color}{record.levelname:8s}{self.RESET} "
            f"{record.name:30s}{context} "
            f"{record.getMessage()}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class LoggerAdapter(logging.LoggerAdapter):
    """Merges the adapter's fixed context and the correlation ids into ``extra``."""

    def process(self, msg: str, kwargs: Any) -> tuple:
        extra = dict(kwargs.get("extra") or {})
        for key, value in _context_fields().items():
            extra.setdefault(key, value)
        if self.extra:
            for key, value in self.extra.items():
                extra.setdefault(key, value)
        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    use_json: bool = False,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional rotating log file; always written as JSON
        use_json: Emit JSON on the console instead of coloured lines
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(StructuredFormatter() if use_json else DevelopmentFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=int(os.getenv("LOG_MAX_BYTES", str(20 * 1024 * 1024))),
            backupCount=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    for noisy in ("httpx", "httpcore", "asyncio", "PIL", "multipart"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str, **extra: Any) -> LoggerAdapter:
    """
    Get a logger carrying fixed context fields.

    Example:
        logger = get_logger(__name__, component="transcriber")
        logger.info("Chunk recognized", extra={"chunk_index": 3})
    """
    return LoggerAdapter(logging.getLogger(name), extra)


def set_request_id(request_id: Optional[str]) -> None:
    request_id_var.set(request_id)


def set_task_id(task_id: Optional[str]) -> None:
    task_id_var.set(task_id)


def set_marker_index(marker_index: Optional[int]) -> None:
    marker_index_var.set(marker_index)


def clear_context() -> None:
    """Reset all correlation fields."""
    request_id_var.set(None)
    task_id_var.set(None)
    marker_index_var.set(None)


class LogTimer:
    """Context manager that logs the start, end and duration of an operation."""

    def __init__(self, logger: logging.LoggerAdapter, operation: str, level: int = logging.INFO):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time: Optional[float] = None
        self.duration: Optional[float] = None

    def __enter__(self) -> "LogTimer":
        self.start_time = time.monotonic()
        self.logger.log(self.level, f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb) -> None:
        self.duration = time.monotonic() - (self.start_time or time.monotonic())
        if exc_type:
            self.logger.error(
                f"Failed: {self.operation}",
                extra={"duration_seconds": round(self.duration, 3), "error": str(exc_val)},
            )
        else:
            self.logger.log(
                self.level,
                f"Completed: {self.operation}",
                extra={"duration_seconds": round(self.duration, 3)},
            )
