"""
Logging Module - Centralized logging configuration
=================================================

This module provides logging setup and utilities including:
- Structured JSON logging
- File and console handlers
- Context-aware logging
- Audit trail events for patient data access
"""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Any
import json
import threading


ROOT_LOGGER = "mediai"
AUDIT_LOGGER = f"{ROOT_LOGGER}.audit"


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Outputs log records as JSON objects for easy parsing and
    integration with log aggregation systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if getattr(record, "extra_data", None):
            log_data["data"] = record.extra_data

        return json.dumps(log_data, default=str)


class ColoredFormatter(logging.Formatter):
    """
    Colored console formatter for readable terminal output.

    Uses ANSI color codes to highlight different log levels.
    Structured fields are appended as key=value pairs.
    """

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        formatted = (
            f"{color}{self.BOLD}[{record.levelname}]{self.RESET} "
            f"{timestamp} | {record.name}:{record.lineno} | "
            f"{record.getMessage()}"
        )

        data = getattr(record, "extra_data", None)
        if data:
            pairs = " ".join(f"{key}={value}" for key, value in data.items())
            formatted += f" | {pairs}"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


class ContextFilter(logging.Filter):
    """
    Logging filter that adds context information to records.

    Merges thread-local context data into each record's ``extra_data``.
    Installed on handlers so records from child loggers are covered too.
    """

    _context = threading.local()

    @classmethod
    def set_context(cls, **kwargs) -> None:
        """Set context values for current thread."""
        if not hasattr(cls._context, "data"):
            cls._context.data = {}
        cls._context.data.update(kwargs)

    @classmethod
    def clear_context(cls) -> None:
        """Clear context for current thread."""
        cls._context.data = {}

    def filter(self, record: logging.LogRecord) -> bool:
        context = getattr(self._context, "data", None)
        if context:
            merged = dict(context)
            merged.update(getattr(record, "extra_data", None) or {})
            record.extra_data = merged
        return True


class LoggerAdapter(logging.LoggerAdapter):
    """
    Custom logger adapter with extra context support.

    Values bound with ``get_logger(name, **extra)`` and values passed
    per call via ``extra=`` end up in the record's ``extra_data``.
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        data = dict(self.extra)
        data.update(kwargs.pop("extra", None) or {})
        if data:
            kwargs["extra"] = {"extra_data": data}
        return msg, kwargs


_loggers: Dict[str, logging.Logger] = {}
_configured = False


def setup_logging(
    log_dir: Optional[str] = None,
    log_level: str = "INFO",
    json_format: bool = False,
    console_output: bool = True
) -> None:
    """
    Set up logging configuration for the application.

    This should be called once at application startup; later calls
    are ignored.

    Args:
        log_dir: Directory for log files (optional)
        log_level: Minimum log level to capture
        json_format: Use JSON format for the main log file
        console_output: Also output to console

    Example:
        setup_logging(
            log_dir="/var/log/mediai",
            log_level="DEBUG",
            json_format=True
        )
    """
    global _configured

    if _configured:
        return

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    context_filter = ContextFilter()

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(ColoredFormatter())
        console_handler.addFilter(context_filter)
        root_logger.addHandler(console_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path / "mediai.log", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        if json_format:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
                )
            )
        file_handler.addFilter(context_filter)
        root_logger.addHandler(file_handler)

        error_handler = logging.FileHandler(log_path / "errors.log", encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(JSONFormatter())
        error_handler.addFilter(context_filter)
        root_logger.addHandler(error_handler)

    _configured = True


def get_logger(name: str, **extra) -> LoggerAdapter:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name, placed under the ``mediai`` namespace
        **extra: Extra context to include in all log messages

    Returns:
        LoggerAdapter instance

    Example:
        logger = get_logger("web.routes", component="chat")
        logger.info("Chat request", extra={"length": 42})
    """
    full_name = name if name.startswith(ROOT_LOGGER) else f"{ROOT_LOGGER}.{name}"

    if full_name not in _loggers:
        _loggers[full_name] = logging.getLogger(full_name)

    return LoggerAdapter(_loggers[full_name], extra)


def audit(event: str, **fields) -> None:
    """
    Record an audit trail event.

    Audit events mark access to or changes of patient data. They are
    logged at INFO on the ``mediai.audit`` logger with a UTC timestamp.

    Args:
        event: Short event name, e.g. ``patient.created``
        **fields: Event attributes (ids, flags); never raw PHI
    """
    fields.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    get_logger(AUDIT_LOGGER).info(event, extra=fields)


def set_log_context(**kwargs) -> None:
    """
    Set thread-local logging context.

    Context values will be included in all subsequent log messages
    in the current thread.

    Example:
        set_log_context(request_id="abc123")
    """
    ContextFilter.set_context(**kwargs)


def clear_log_context() -> None:
    """Clear thread-local logging context."""
    ContextFilter.clear_context()
