"""Logging configuration for oracle-dml-common.

Catalog SQL, connection attempts and progress messages are emitted through
standard module loggers. This module wires them to stdout in JSON or text
form and keeps passwords out of the output: connection descriptors such as
``scott/tiger@orcl`` show up as ``scott/***@orcl``.
"""

import json
import logging
import re
import sys
from typing import Any, ClassVar

REDACTED = "***REDACTED***"
MASK = "***"

# usr/pwd@db and the :approle/rolepwd suffix
_DESCRIPTOR_PASSWORD = re.compile(r"(\w+/)(\w+)(@)")
_APPROLE_PASSWORD = re.compile(r"(:\w+/)(\w+)")
# pwd=... inside ODBC DSN strings
_DSN_PASSWORD = re.compile(r"(pwd=)([^;]*)", re.IGNORECASE)


def mask_secrets(text: str) -> str:
    """Mask passwords embedded in connection descriptors and DSN strings.

    Args:
        text: Any message text.

    Returns:
        The text with password parts replaced by ``***``.

    Example:
        >>> mask_secrets("scott/tiger@orcl:app/secret")
        'scott/***@orcl:app/***'
    """
    text = _DESCRIPTOR_PASSWORD.sub(rf"\g<1>{MASK}\g<3>", text)
    text = _APPROLE_PASSWORD.sub(rf"\g<1>{MASK}", text)
    return _DSN_PASSWORD.sub(rf"\g<1>{MASK}", text)


class SensitiveDataFilter(logging.Filter):
    """Filter to sanitize sensitive data from log records.

    Masks passwords inside the message and its arguments, and redacts
    extra fields whose key names look sensitive.

    Example:
        >>> handler = logging.StreamHandler()
        >>> handler.addFilter(SensitiveDataFilter())
    """

    SENSITIVE_KEYS: ClassVar[set[str]] = {
        "password",
        "passwd",
        "pwd",
        "secret",
        "conn_string",
        "approle_password",
        "token",
        "auth",
        "authorization",
    }

    def filter(self, record: logging.LogRecord) -> bool:
        """Sanitize the log record.

        Args:
            record: The log record to filter.

        Returns:
            bool: Always True to allow the record through (after sanitization).
        """
        if isinstance(record.msg, str):
            record.msg = mask_secrets(record.msg)

        if record.args:
            record.args = self._sanitize_data(record.args)

        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE_KEYS:
                record.__dict__[key] = REDACTED
            elif isinstance(record.__dict__[key], dict):
                record.__dict__[key] = self._sanitize_dict(record.__dict__[key])

        return True

    def _sanitize_data(self, data: Any) -> Any:
        """Recursively sanitize data structures."""
        if isinstance(data, dict):
            return self._sanitize_dict(data)
        elif isinstance(data, (list, tuple)):
            return type(data)(self._sanitize_data(item) for item in data)
        elif isinstance(data, str):
            return mask_secrets(data)
        return data

    def _sanitize_dict(self, data: dict[str, Any]) -> dict[str, Any]:
        """Sanitize dictionary keys that may contain sensitive data."""
        sanitized: dict[str, Any] = {}
        for key, value in data.items():
            if str(key).lower() in self.SENSITIVE_KEYS:
                sanitized[key] = REDACTED
            else:
                sanitized[key] = self._sanitize_data(value)
        return sanitized


_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging.

    Example:
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(JSONFormatter())
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter for console output."""

    def format(self, record: logging.LogRecord) -> str:
        # timestamp [level] logger - message
        formatted = (
            f"{self.formatTime(record, self.datefmt)} "
            f"[{record.levelname}] "
            f"{record.name} - "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


def configure_logging(
    level: str = "INFO",
    log_format: str = "text",
    enable_sensitive_filter: bool = True,
) -> None:
    """Configure application logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Format type ("json" or "text").
        enable_sensitive_filter: Whether to mask passwords and secrets.

    Example:
        >>> configure_logging(level="DEBUG", log_format="json")
        >>> logger = logging.getLogger(__name__)
        >>> logger.debug("SELECT cname FROM col")
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)

    formatter: logging.Formatter
    if log_format == "json":
        formatter = JSONFormatter(datefmt="%Y-%m-%dT%H:%M:%S")
    else:
        formatter = TextFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    if enable_sensitive_filter:
        handler.addFilter(SensitiveDataFilter())

    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))

    # Reduce noise from driver libraries
    logging.getLogger("oracledb").setLevel(logging.WARNING)
    logging.getLogger("duckdb").setLevel(logging.WARNING)
