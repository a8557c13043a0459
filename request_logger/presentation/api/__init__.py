"""FastAPI application factory wiring the request logger."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from request_logger.domain.exceptions import InternalServerError, UnprocessableEntityError
from request_logger.infrastructure.config import RequestLogConfig, Settings, get_settings
from request_logger.infrastructure.logging.config import configure_logging, get_logger
from request_logger.presentation.api.middleware.error_handling import setup_exception_handlers
from request_logger.presentation.api.middleware.request_logging import RequestLogMiddleware


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan events."""
    logger.info("application_startup", app_name=app.title, version=app.version)
    yield
    logger.info("application_shutdown")


def create_app(
    settings: Settings | None = None,
    config: RequestLogConfig | None = None,
) -> FastAPI:
    """Create the demonstration application.

    Routes:
    - GET /ok: 200 with a plain text body
    - GET /warn: fails with 422 Unprocessable Entity
    - GET /err: fails with 500 Internal Server Error
    - GET /private: plain 200, meant to be excluded via REQUEST_LOG_SKIP_PATHS
    - GET /whoami: stores the ``user`` query parameter as the request username

    Args:
        settings: Application settings (defaults to environment settings)
        config: Middleware options (defaults to the ones built from settings)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    setup_exception_handlers(app)
    app.add_middleware(
        RequestLogMiddleware,
        config=config or settings.request_log_config(),
    )

    @app.get("/ok", response_class=PlainTextResponse)
    async def ok() -> str:
        return "ok"

    @app.get("/warn")
    async def warn() -> None:
        raise UnprocessableEntityError()

    @app.get("/err")
    async def err() -> None:
        raise InternalServerError()

    @app.get("/private", response_class=PlainTextResponse)
    async def private() -> str:
        return "private"

    @app.get("/whoami", response_class=PlainTextResponse)
    async def whoami(request: Request, user: str = "") -> str:
        request.state.username = user
        return user or "anonymous"

    return app
