"""Logging configuration with optional JSON output and per-cycle correlation IDs.

Example Usage:
    >>> from coin_trade_monitor.monitoring.logging_config import (
    ...     setup_logging,
    ...     CorrelationContext
    ... )
    >>>
    >>> setup_logging(level="INFO", structured=True)
    >>>
    >>> import logging
    >>> logger = logging.getLogger(__name__)
    >>>
    >>> with CorrelationContext():
    ...     logger.info("Checking pair", extra={'pair_id': 'mock:BTC-USD'})
    ...     # All logs within this context share the same correlation_id

Correlation IDs live in a ContextVar, so every task spawned inside a cycle
(one per tracked pair) inherits the cycle's id.
"""

import contextvars
import json
import logging
import logging.handlers
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)

LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class CorrelationIDFilter(logging.Filter):
    """Inject the current correlation ID into all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id()
        return True


class SecretRedactionFilter(logging.Filter):
    """Redact exchange API keys and secrets from log messages."""

    PATTERNS = [
        (
            re.compile(
                r'(api[_-]?key["\']?\s*[:=]\s*["\']?)([A-Za-z0-9_\-]{16,})',
                re.IGNORECASE,
            ),
            r"\1***KEY_REDACTED***",
        ),
        (
            re.compile(
                r'((?:api[_-]?)?secret["\']?\s*[:=]\s*["\']?)([A-Za-z0-9_\-\.+/=]{16,})',
                re.IGNORECASE,
            ),
            r"\1***SECRET_REDACTED***",
        ),
    ]

    def redact(self, text: str) -> str:
        for pattern, replacement in self.PATTERNS:
            text = pattern.sub(replacement, text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if record.args:
            record.msg = record.getMessage()
            record.args = None
        record.msg = self.redact(str(record.msg))
        return True


class StructuredJSONFormatter(logging.Formatter):
    """Format log records as JSON with structured metadata.

    Output format:
        {
            "timestamp": "2026-01-05T10:15:36.123456+00:00",
            "correlation_id": "550e8400-e29b-41d4-a716-446655440000",
            "level": "INFO",
            "logger": "coin_trade_monitor.services.trade_monitor_service",
            "message": "Cycle complete",
            "module": "trade_monitor_service",
            "function": "run_cycle",
            "line": 120,
            "context": {"pair_id": "mock:BTC-USD"}
        }
    """

    RESERVED_FIELDS = {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "correlation_id",
    }

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "correlation_id": getattr(record, "correlation_id", None),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self.RESERVED_FIELDS and not key.startswith("_")
        }
        if context:
            log_data["context"] = context

        return json.dumps(log_data, default=str)


def get_correlation_id() -> Optional[str]:
    return _correlation_id.get()


def set_correlation_id(correlation_id: Optional[str] = None) -> contextvars.Token:
    return _correlation_id.set(correlation_id or str(uuid.uuid4()))


class CorrelationContext:
    """Context manager for scoped correlation IDs.

    Example:
        >>> with CorrelationContext():
        ...     logger.info("First log")
        ...     logger.info("Second log")
        ...     # Both logs share the same correlation_id
    """

    def __init__(self, correlation_id: Optional[str] = None):
        self.correlation_id = correlation_id
        self._token = None

    def __enter__(self):
        self._token = set_correlation_id(self.correlation_id)
        self.correlation_id = _correlation_id.get()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _correlation_id.reset(self._token)


def resolve_level(level) -> int:
    """Map a level name (or number) to a logging constant, defaulting to INFO."""
    if isinstance(level, int):
        return level
    if isinstance(level, str) and level.upper() in LEVEL_MAP:
        return LEVEL_MAP[level.upper()]
    logging.warning(f"Invalid logging level '{level}' in config, using INFO")
    return logging.INFO


def setup_logging(
    level="INFO",
    structured: bool = False,
    log_file: Optional[str] = None,
    verbose: bool = False,
) -> None:
    """Configure the root logger.

    Args:
        level: Level name from config
        structured: Emit JSON lines instead of plain text
        log_file: Optional path of a rotating log file
        verbose: If True, override config and use DEBUG level

    Priority: --verbose flag > config value > INFO default
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    formatter = StructuredJSONFormatter() if structured else logging.Formatter(TEXT_FORMAT)
    handlers = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_file, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(CorrelationIDFilter())
        handler.addFilter(SecretRedactionFilter())
        root_logger.addHandler(handler)

    root_logger.setLevel(logging.DEBUG if verbose else resolve_level(level))
