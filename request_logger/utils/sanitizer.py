"""Redaction of sensitive values in request log records.

Header tagging logs header values verbatim. When a configured header carries
credentials (Authorization, Cookie, API keys), the logging pipeline replaces
its value before the record reaches the sink.
"""

from typing import Any


REDACTED = "***REDACTED***"

# Sensitive field patterns that should be redacted
SENSITIVE_PATTERNS = {
    # Authentication & Authorization
    "password",
    "passwd",
    "secret",
    "api_key",
    "apikey",
    "token",
    "jwt",
    "bearer",
    "authorization",
    "credentials",
    # Session headers
    "cookie",
    "set_cookie",
    # API Signatures
    "signature",
    "x_api_key",
}


def is_sensitive_key(key: str, patterns: set[str] | None = None) -> bool:
    """Check if a key matches any sensitive pattern.

    Args:
        key: The key to check (case-insensitive, normalized)
        patterns: Optional custom patterns (defaults to SENSITIVE_PATTERNS)

    Returns:
        True if key matches any sensitive pattern, False otherwise

    Example:
        >>> is_sensitive_key("Authorization")
        True
        >>> is_sensitive_key("set-cookie")
        True
        >>> is_sensitive_key("content-type")
        False
    """
    if patterns is None:
        patterns = SENSITIVE_PATTERNS

    # Normalize key: lowercase, replace separators with underscores
    normalized_key = key.lower().replace("-", "_").replace(".", "_").replace(" ", "_")

    for pattern in patterns:
        normalized_pattern = pattern.replace(".", "_").replace("-", "_")
        if normalized_pattern in normalized_key:
            return True

    return False


def sanitize_dict(
    data: dict[str, Any],
    patterns: set[str] | None = None,
    recursive: bool = True,
) -> dict[str, Any]:
    """Return a copy of ``data`` with sensitive values redacted.

    Args:
        data: Dictionary to sanitize
        patterns: Optional custom patterns (defaults to SENSITIVE_PATTERNS)
        recursive: Whether to recursively sanitize nested dicts

    Returns:
        New dictionary with sensitive values redacted

    Example:
        >>> sanitize_dict({"authorization": "Bearer abc", "status": 200})
        {'authorization': '***REDACTED***', 'status': 200}
    """
    sanitized: dict[str, Any] = {}

    for key, value in data.items():
        if is_sensitive_key(key, patterns):
            sanitized[key] = REDACTED
        elif recursive and isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, patterns, recursive)
        else:
            sanitized[key] = value

    return sanitized
