"""Translation of handler chain errors into responses.

Exception handlers registered here convert errors into consistent JSON
responses following the ErrorResponse schema and remember the original error
on the request state, so the request logger can still report its message
after the framework has already turned it into a response.
"""

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException
from starlette.responses import Response

from request_logger.domain.exceptions import HTTPStatusError, describe_error
from request_logger.infrastructure.constants import CHAIN_ERROR_STATE_KEY
from request_logger.infrastructure.logging.config import get_logger
from request_logger.presentation.schemas.error import ErrorDetail, ErrorResponse


logger = get_logger(__name__)

# Type alias for cleaner function signatures
ExceptionHandler = Callable[[Request, Any], Awaitable[Response]]


def record_chain_error(request: Request, exc: BaseException) -> None:
    """Remember the error returned by the handler chain for this request."""
    setattr(request.state, CHAIN_ERROR_STATE_KEY, exc)


def chain_error(request: Request) -> BaseException | None:
    """Return the error recorded for this request, if any."""
    return getattr(request.state, CHAIN_ERROR_STATE_KEY, None)


def _lookup_handler(request: Request, exc: Exception) -> Callable[..., Any] | None:
    app = request.scope.get("app")
    handlers: dict[Any, Callable[..., Any]] = getattr(app, "exception_handlers", None) or {}

    if isinstance(exc, HTTPException) and exc.status_code in handlers:
        return handlers[exc.status_code]
    for cls in type(exc).__mro__:
        if cls in handlers:
            return handlers[cls]
    return None


async def translate_error(request: Request, exc: Exception) -> Response:
    """Turn an error that escaped the handler chain into a response.

    Runs the application's exception handler registered for the error type.
    When no handler exists or the handler fails itself, a plain 500 response
    is produced instead.

    Args:
        request: Incoming HTTP request
        exc: Error raised by the handler chain

    Returns:
        Response to send to the client
    """
    record_chain_error(request, exc)

    handler = _lookup_handler(request, exc)
    if handler is not None:
        try:
            result = handler(request, exc)
            if inspect.isawaitable(result):
                result = await result
        except Exception as translation_exc:
            logger.warning(
                "error_translation_failed",
                exception_type=type(exc).__name__,
                translation_error=str(translation_exc),
                path=request.url.path,
            )
        else:
            if isinstance(result, Response):
                return result

    return PlainTextResponse(
        "Internal Server Error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def _error_response(
    status_code: int,
    code: str,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    error_response = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details),
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(),
        headers=headers,
    )


async def http_status_error_handler(request: Request, exc: HTTPStatusError) -> JSONResponse:
    """Handle application errors that carry their own HTTP status code.

    Args:
        request: Incoming HTTP request
        exc: Application error instance

    Returns:
        JSON response with error details and the error's status code
    """
    record_chain_error(request, exc)
    return _error_response(exc.status_code, exc.code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: HTTPException) -> Response:
    """Handle Starlette/FastAPI HTTPException, including router 404/405."""
    record_chain_error(request, exc)
    if exc.status_code in (status.HTTP_204_NO_CONTENT, status.HTTP_304_NOT_MODIFIED):
        return Response(status_code=exc.status_code, headers=exc.headers)
    return _error_response(
        exc.status_code,
        "HTTP_ERROR",
        describe_error(exc),
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request parsing errors (422) raised by FastAPI."""
    record_chain_error(request, exc)
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_CONTENT,
        "VALIDATION_ERROR",
        "Request validation failed",
        details=jsonable_encoder(exc.errors()),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions as last resort.

    Returns a safe generic message; the request logger reports the original
    error message.

    Args:
        request: Incoming HTTP request
        exc: Unhandled exception

    Returns:
        JSON response with generic error message (500 status)
    """
    record_chain_error(request, exc)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred",
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    status_error_handler: ExceptionHandler = http_status_error_handler
    app.add_exception_handler(HTTPStatusError, status_error_handler)

    http_handler: ExceptionHandler = http_exception_handler
    app.add_exception_handler(HTTPException, http_handler)

    validation_handler: ExceptionHandler = validation_exception_handler
    app.add_exception_handler(RequestValidationError, validation_handler)

    # Generic exception handler (catch-all)
    generic_handler: ExceptionHandler = generic_exception_handler
    app.add_exception_handler(Exception, generic_handler)
