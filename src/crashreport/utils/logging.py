"""Structured logging for crashreport.

structlog renders every entry through the standard library to stderr, so the
CLI can keep stdout for report JSON. Entries pass through the secret redactor
before rendering, since crash data tends to carry credentials.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from enum import StrEnum
from typing import Any, cast

import structlog

from crashreport.utils.security import SecretRedactor


class LogFormat(StrEnum):
    """Log output format options."""

    JSON = "json"
    CONSOLE = "console"


class LogLevel(StrEnum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


SERVICE_NAME = "crashreport"

_redactor = SecretRedactor()


def sanitize_log_value(value: Any) -> Any:
    """Redact secrets in a log value, descending into dicts, lists and tuples."""
    if isinstance(value, str):
        return _redactor.redact(value)
    if isinstance(value, dict):
        return {key: sanitize_log_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(sanitize_log_value(item) for item in value)
    return value


def secret_sanitizer(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor that redacts secrets in every field."""
    return cast(MutableMapping[str, Any], sanitize_log_value(event_dict))


def add_context_processor(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor that tags entries with the service and its version."""
    event_dict["service"] = SERVICE_NAME
    try:
        from crashreport._version import __version__
    except (ImportError, RuntimeError):
        return event_dict
    event_dict["version"] = __version__
    return event_dict


def _renderer(log_format: LogFormat) -> Any:
    if log_format == LogFormat.JSON:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    log_format: LogFormat | str = LogFormat.JSON,
) -> None:
    """Configure structlog and the root logger.

    May be called again, for example once a configuration file has been
    read; loggers pick up the new settings on their next call.

    Args:
        level: Minimum level to emit
        log_format: ``json`` for log collectors, ``console`` for terminals

    Raises:
        ValueError: If the level or format is unknown
    """
    level = LogLevel(str(level).upper())
    log_format = LogFormat(str(log_format).lower())
    numeric_level = getattr(logging, level.value)

    structlog.configure(
        processors=[
            add_context_processor,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            secret_sanitizer,
            structlog.processors.format_exc_info,
            _renderer(log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        handlers=[handler],
        force=True,
    )
