"""Tests for status code to severity mapping."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from request_logger.domain.severity import level_for_status


class TestLevelForStatus:
    """Test severity boundaries."""

    @pytest.mark.parametrize(
        ("status_code", "expected"),
        [
            (200, "info"),
            (304, "info"),
            (399, "info"),
            (400, "warning"),
            (404, "warning"),
            (422, "warning"),
            (499, "warning"),
            (500, "error"),
            (503, "error"),
        ],
    )
    def test_maps_boundaries(self, status_code: int, expected: str) -> None:
        """Test documented boundary status codes."""
        assert level_for_status(status_code) == expected

    @given(status_code=st.integers(min_value=100, max_value=399))
    def test_below_client_errors_is_info(self, status_code: int) -> None:
        """Property: informational, success and redirect codes log at info."""
        assert level_for_status(status_code) == "info"

    @given(status_code=st.integers(min_value=400, max_value=499))
    def test_client_errors_are_warnings(self, status_code: int) -> None:
        """Property: every 4xx logs at warning."""
        assert level_for_status(status_code) == "warning"

    @given(status_code=st.integers(min_value=500, max_value=999))
    def test_server_errors_are_errors(self, status_code: int) -> None:
        """Property: every status from 500 up logs at error."""
        assert level_for_status(status_code) == "error"
