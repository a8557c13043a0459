"""HTTP request logging middleware.

Emits exactly one structured record per request with status, method, path,
latency, remote address and correlation id, plus the optional fields enabled
in RequestLogConfig. The record severity follows the final status code:
warning for 4xx, error for 5xx, info otherwise.
"""

import time
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
from uuid_extension import uuid7

from request_logger.domain.exceptions import describe_error
from request_logger.domain.severity import level_for_status
from request_logger.domain.tags import collect_tags
from request_logger.infrastructure.config import RequestLogConfig
from request_logger.infrastructure.constants import Headers, RecordFields
from request_logger.infrastructure.logging.config import get_logger
from request_logger.presentation.api.middleware.error_handling import (
    chain_error,
    translate_error,
)


logger = get_logger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Middleware logging one structured record per HTTP request.

    Errors that escape the handler chain are translated here and their message
    becomes the record summary. Errors the framework turns into a response
    inside the chain (HTTPException, registered application errors) only reach
    the record when their handler calls ``record_chain_error``; the handlers
    installed by ``setup_exception_handlers`` do. With FastAPI's default
    handlers such records carry an empty message.

    Example:
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
        >>> app.add_middleware(
        ...     RequestLogMiddleware,
        ...     config=RequestLogConfig(tag_response_headers=("content-type",)),
        ... )
    """

    def __init__(self, app: ASGIApp, config: RequestLogConfig | None = None) -> None:
        super().__init__(app)
        self.config = config or RequestLogConfig()
        self.sink = self.config.logger or get_logger("request_logger")

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request, measure latency and log the outcome.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in the chain

        Returns:
            HTTP response from downstream handlers, or the translated error
            response when the chain failed
        """
        if self.config.skip is not None and self.config.skip(request):
            return await call_next(request)

        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            response = await translate_error(request, exc)

        latency = timedelta(seconds=time.perf_counter() - start)

        error = chain_error(request)
        message = describe_error(error) if error is not None else ""

        request_id = request.headers.get(self.config.request_id_header)
        if not request_id:
            request_id = str(uuid7())
            response.headers[self.config.request_id_header] = request_id

        try:
            fields = self._build_fields(request, response, request_id, latency)
            emit = getattr(self.sink, level_for_status(response.status_code))
            emit(message, **fields)
        except Exception as exc:
            # A failing sink never fails the request
            logger.warning(
                "request_log_failed",
                error=str(exc),
                exception_type=type(exc).__name__,
                path=request.url.path,
            )

        return response

    def _build_fields(
        self,
        request: Request,
        response: Response,
        request_id: str,
        latency: timedelta,
    ) -> dict[str, Any]:
        config = self.config
        remote_ip = request.client.host if request.client else ""

        fields: dict[str, Any] = {
            RecordFields.TAG: RecordFields.TAG_VALUE,
            RecordFields.ID: request_id,
            RecordFields.STATUS: response.status_code,
            RecordFields.METHOD: request.method,
            RecordFields.PATH: request.url.path,
            RecordFields.REMOTE_IP: remote_ip,
            RecordFields.PROTOCOL: _protocol(request),
            RecordFields.LATENCY: latency,
        }

        if config.log_host and (host := request.url.hostname):
            fields[RecordFields.HOST] = host

        if config.log_forwarded_for and (
            forwarded := request.headers.get(Headers.FORWARDED_FOR) or remote_ip
        ):
            fields[RecordFields.FORWARDED_FOR] = forwarded

        if config.log_username:
            username = getattr(request.state, config.log_username, None)
            if isinstance(username, str) and username:
                fields[RecordFields.USERNAME] = username

        if config.log_user_agent and (user_agent := request.headers.get(Headers.USER_AGENT)):
            fields[RecordFields.USER_AGENT] = user_agent

        for name in config.tag_request_headers:
            if value := request.headers.get(name):
                fields[name] = value

        for name in config.tag_response_headers:
            if value := response.headers.get(name):
                fields[name] = value

        fields.update(collect_tags(config.tags, request.state))
        return fields


def _protocol(request: Request) -> str:
    http_version = request.scope.get("http_version", "1.1")
    return f"HTTP/{http_version}"
