"""Structured logging configuration for request log records."""

import logging
import sys
from datetime import timedelta
from typing import Any, cast

import structlog

from request_logger.infrastructure.config import Settings
from request_logger.utils.sanitizer import sanitize_dict


def render_durations(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Render ``timedelta`` values as float milliseconds.

    Latency and duration tags travel through the pipeline as ``timedelta`` and
    are only turned into numbers here, right before rendering.
    """
    for key, value in event_dict.items():
        if isinstance(value, timedelta):
            event_dict[key] = round(value.total_seconds() * 1000, 3)
    return event_dict


def render_error_lists(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Render lists of exceptions as lists of their messages."""
    for key, value in event_dict.items():
        if (
            isinstance(value, list)
            and value
            and all(isinstance(item, BaseException) for item in value)
        ):
            event_dict[key] = [str(item) or type(item).__name__ for item in value]
    return event_dict


def sanitize_sensitive_data(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Redact sensitive fields from log events.

    Tagged headers such as Authorization or Cookie are logged verbatim by the
    middleware; this processor replaces their values before rendering.

    Args:
        logger: Logger instance (unused)
        method_name: Method name (unused)
        event_dict: Event dictionary to sanitize

    Returns:
        Sanitized event dictionary
    """
    return sanitize_dict(event_dict, recursive=True)


def shared_processors() -> list[Any]:
    """Processors applied to every record before rendering."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        render_durations,
        render_error_lists,
        sanitize_sensitive_data,
        structlog.processors.StackInfoRenderer(),
    ]


def configure_logging(settings: Settings) -> None:
    """Configure structured logging for the application."""
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Configure standard logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    if settings.is_development:
        # Pretty console output for development
        processors = shared_processors() + [
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ]
    else:
        # JSON output for production
        processors = shared_processors() + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=cast("Any", processors),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
