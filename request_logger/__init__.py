"""Structured request logging middleware for FastAPI and Starlette."""

from request_logger.domain.severity import level_for_status
from request_logger.domain.tags import TagKind, TagValue
from request_logger.infrastructure.config import RequestLogConfig, Settings, skip_paths
from request_logger.presentation.api.middleware.error_handling import (
    record_chain_error,
    setup_exception_handlers,
)
from request_logger.presentation.api.middleware.request_logging import RequestLogMiddleware


__all__ = [
    "RequestLogConfig",
    "RequestLogMiddleware",
    "Settings",
    "TagKind",
    "TagValue",
    "level_for_status",
    "record_chain_error",
    "setup_exception_handlers",
    "skip_paths",
]
