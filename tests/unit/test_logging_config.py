"""Tests for the structured logging pipeline."""

from datetime import timedelta

import pytest
import structlog

from request_logger.infrastructure.config import Settings
from request_logger.infrastructure.logging.config import (
    configure_logging,
    get_logger,
    render_durations,
    render_error_lists,
    sanitize_sensitive_data,
    shared_processors,
)
from request_logger.utils.sanitizer import REDACTED


class TestRenderDurations:
    """Test duration rendering."""

    def test_renders_timedelta_as_milliseconds(self) -> None:
        """Test latency is rendered as float milliseconds."""
        # Arrange
        event_dict = {"event": "", "latency": timedelta(milliseconds=12, microseconds=500)}

        # Act
        result = render_durations(None, "info", event_dict)

        # Assert
        assert result["latency"] == 12.5

    def test_leaves_other_values(self) -> None:
        """Test non-duration values are untouched."""
        event_dict = {"status": 200, "path": "/ok"}
        assert render_durations(None, "info", event_dict) == {"status": 200, "path": "/ok"}


class TestRenderErrorLists:
    """Test error list rendering."""

    def test_renders_exceptions_as_messages(self) -> None:
        """Test lists of exceptions become lists of messages."""
        # Arrange
        event_dict = {"failures": [ValueError("bad input"), KeyError()]}

        # Act
        result = render_error_lists(None, "error", event_dict)

        # Assert
        assert result["failures"] == ["bad input", "KeyError"]

    @pytest.mark.parametrize("value", [[], ["a"], [ValueError("x"), "y"]])
    def test_leaves_other_lists(self, value: list[object]) -> None:
        """Test lists that are not all exceptions are untouched."""
        assert render_error_lists(None, "info", {"v": value})["v"] is value


class TestSanitizeSensitiveData:
    """Test redaction in the processor chain."""

    def test_redacts_tagged_credential_headers(self) -> None:
        """Test tagged Authorization and Cookie headers are redacted."""
        # Arrange
        event_dict = {
            "event": "",
            "authorization": "Bearer abc",
            "cookie": "session=1",
            "content-type": "text/plain",
        }

        # Act
        result = sanitize_sensitive_data(None, "info", event_dict)

        # Assert
        assert result["authorization"] == REDACTED
        assert result["cookie"] == REDACTED
        assert result["content-type"] == "text/plain"


class TestConfigureLogging:
    """Test structlog configuration per environment."""

    def test_uses_json_renderer_outside_development(self) -> None:
        """Test production output is JSON."""
        # Act
        configure_logging(Settings(app_env="production"))

        # Assert
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_uses_console_renderer_in_development(self) -> None:
        """Test development output is rendered for the console."""
        # Act
        configure_logging(Settings(app_env="development"))

        # Assert
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_shared_processors_render_before_redaction(self) -> None:
        """Test rendering processors run ahead of redaction."""
        processors = shared_processors()

        assert processors.index(render_durations) < processors.index(sanitize_sensitive_data)
        assert processors.index(render_error_lists) < processors.index(sanitize_sensitive_data)

    def test_get_logger_exposes_level_methods(self) -> None:
        """Test loggers expose the methods used for request records."""
        logger = get_logger("request_logger")

        for method in ["info", "warning", "error"]:
            assert callable(getattr(logger, method))
