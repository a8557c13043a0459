"""Tests for sensitive value redaction."""

import pytest

from request_logger.utils.sanitizer import REDACTED, is_sensitive_key, sanitize_dict


class TestIsSensitiveKey:
    """Test key matching."""

    @pytest.mark.parametrize(
        "key",
        ["authorization", "Authorization", "cookie", "set-cookie", "x-api-key", "access_token"],
    )
    def test_matches_sensitive_keys(self, key: str) -> None:
        """Test credential-carrying keys are sensitive."""
        assert is_sensitive_key(key) is True

    @pytest.mark.parametrize(
        "key", ["content-type", "status", "path", "user-agent", "username", "x-request-id"]
    )
    def test_ignores_regular_keys(self, key: str) -> None:
        """Test regular record fields are not sensitive."""
        assert is_sensitive_key(key) is False

    def test_uses_custom_patterns(self) -> None:
        """Test custom patterns replace the defaults."""
        assert is_sensitive_key("x-tenant", {"tenant"}) is True
        assert is_sensitive_key("authorization", {"tenant"}) is False


class TestSanitizeDict:
    """Test dictionary redaction."""

    def test_redacts_sensitive_values(self) -> None:
        """Test sensitive values are replaced and others kept."""
        # Arrange
        data = {"authorization": "Bearer abc", "status": 200, "path": "/ok"}

        # Act
        result = sanitize_dict(data)

        # Assert
        assert result == {"authorization": REDACTED, "status": 200, "path": "/ok"}
        assert data["authorization"] == "Bearer abc"

    def test_redacts_nested_values(self) -> None:
        """Test nested objects are sanitized recursively."""
        result = sanitize_dict({"owner": {"token": "t", "id": 1}})
        assert result == {"owner": {"token": REDACTED, "id": 1}}

    def test_skips_nested_values_when_not_recursive(self) -> None:
        """Test recursion can be switched off."""
        result = sanitize_dict({"owner": {"token": "t"}}, recursive=False)
        assert result == {"owner": {"token": "t"}}
