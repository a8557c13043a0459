"""Global test configuration and fixtures.

Fixture Scoping Strategy:
- session: test settings (immutable)
- function: log capture, sinks, apps and clients (need fresh state)
"""

import logging
from collections.abc import Callable, Generator
from typing import Any

import pytest
import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient
from structlog.testing import LogCapture

from request_logger.infrastructure.config import RequestLogConfig, Settings, get_settings
from request_logger.presentation.api.middleware.error_handling import setup_exception_handlers
from request_logger.presentation.api.middleware.request_logging import RequestLogMiddleware


# ============================================================================
# Session-Scoped Fixtures (Immutable Resources)
# ============================================================================


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings (session-scoped, settings are immutable)."""
    return Settings(
        app_env="testing",
        app_name="Request Logger Test",
        log_level="DEBUG",
        request_log_skip_paths=["/private"],
        request_log_response_headers=["content-type"],
    )


# ============================================================================
# Function-Scoped Fixtures (Stateful Resources)
# ============================================================================


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None]:
    """Restore structlog defaults and clear cached settings after each test."""
    yield
    structlog.reset_defaults()
    get_settings.cache_clear()


@pytest.fixture
def log_capture() -> LogCapture:
    """Collect every record written to the capture sink."""
    return LogCapture()


@pytest.fixture
def capture_sink(log_capture: LogCapture) -> Any:
    """Create a structlog logger that only feeds ``log_capture``.

    Example:
        >>> def test_records(capture_sink, log_capture):
        ...     capture_sink.info("", status=200)
        ...     assert log_capture.entries[0]["log_level"] == "info"
    """
    return structlog.wrap_logger(
        None,
        processors=[log_capture],
        wrapper_class=structlog.make_filtering_bound_logger(logging.NOTSET),
    )


@pytest.fixture
def make_app(capture_sink: Any) -> Callable[..., FastAPI]:
    """Factory for a bare FastAPI app wrapped by the request logger.

    Keyword arguments are forwarded to RequestLogConfig; the capture sink is
    used unless ``logger`` is given. Pass ``handlers=False`` to leave the
    application without the bundled exception handlers.
    """

    def factory(handlers: bool = True, **options: Any) -> FastAPI:
        options.setdefault("logger", capture_sink)
        app = FastAPI()
        if handlers:
            setup_exception_handlers(app)
        app.add_middleware(RequestLogMiddleware, config=RequestLogConfig(**options))
        return app

    return factory


@pytest.fixture
def make_client() -> Callable[[FastAPI], TestClient]:
    """Factory for synchronous test clients."""

    def factory(app: FastAPI) -> TestClient:
        return TestClient(app)

    return factory
