"""HTTP-facing exceptions raised by handlers behind the request logger.

This module defines the exception hierarchy that exception handlers translate
into error responses, and the helper that turns any chain error into the
human-readable summary of a request log record.
"""

from typing import Any

from starlette.exceptions import HTTPException


class HTTPStatusError(Exception):
    """Base exception for errors that map onto an HTTP status code.

    Provides a consistent interface with a status code, an error code and
    optional contextual details.

    Attributes:
        status_code: HTTP status code of the resulting response
        code: Machine-readable error code
        message: Human-readable error message
        details: Optional additional error context (dict or list)
    """

    status_code: int = 500
    code: str = "HTTP_ERROR"
    default_message: str = "Internal Server Error"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | list[Any] | None = None,
    ) -> None:
        """Initialize HTTP status exception.

        Args:
            message: Human-readable error description (defaults to the status phrase)
            details: Optional additional context about the error
        """
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class BadRequestError(HTTPStatusError):
    """Raised when the request is malformed."""

    status_code = 400
    code = "BAD_REQUEST"
    default_message = "Bad Request"


class NotFoundError(HTTPStatusError):
    """Raised when a requested resource does not exist."""

    status_code = 404
    code = "NOT_FOUND"
    default_message = "Not Found"


class UnprocessableEntityError(HTTPStatusError):
    """Raised when the request is well-formed but semantically invalid."""

    status_code = 422
    code = "UNPROCESSABLE_ENTITY"
    default_message = "Unprocessable Entity"


class InternalServerError(HTTPStatusError):
    """Raised when the handler failed in an unexpected way."""

    status_code = 500
    code = "INTERNAL_SERVER_ERROR"
    default_message = "Internal Server Error"


class ServiceUnavailableError(HTTPStatusError):
    """Raised when a downstream dependency is unavailable."""

    status_code = 503
    code = "SERVICE_UNAVAILABLE"
    default_message = "Service Unavailable"


def describe_error(exc: BaseException) -> str:
    """Return the message used as the summary of a request log record.

    Args:
        exc: Error returned by the handler chain

    Returns:
        Non-empty human-readable error message

    Example:
        >>> describe_error(UnprocessableEntityError())
        'Unprocessable Entity'
        >>> describe_error(ValueError())
        'ValueError'
    """
    if isinstance(exc, HTTPStatusError):
        message = exc.message
    elif isinstance(exc, HTTPException):
        message = str(exc.detail)
    else:
        message = str(exc)
    return message or type(exc).__name__
