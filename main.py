"""Run the demonstration application with uvicorn."""

import uvicorn

from request_logger.infrastructure.config import get_settings
from request_logger.presentation.api import create_app


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
