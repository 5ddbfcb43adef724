"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
import uvicorn
from fastapi import Depends, FastAPI

from mentor_proxy import __version__
from mentor_proxy.config import Settings, get_settings
from mentor_proxy.dependencies import get_app_settings
from mentor_proxy.exceptions import ConfigurationError, ServiceError
from mentor_proxy.handlers import (
    invoke_mentor,
    preflight,
    service_error_handler,
    unhandled_error_handler,
)
from mentor_proxy.logging import configure_logging
from mentor_proxy.services.gemini_service import GeminiService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create application resources during startup and clean up on shutdown."""

    settings: Settings = app.state.settings
    async with httpx.AsyncClient(timeout=settings.provider_timeout) as client:
        try:
            app.state.gemini_service = GeminiService(client, settings)
            app.state.configuration_error = None
        except ConfigurationError as exc:
            logger.critical(
                "Provider credential missing; invocations will fail",
                extra={"code": exc.code},
            )
            app.state.gemini_service = None
            app.state.configuration_error = exc
        yield
        del app.state.gemini_service


def create_app(settings: Settings | None = None) -> FastAPI:
    """Application factory."""

    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Mentor Proxy",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.add_exception_handler(ServiceError, service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/version")
    async def version(settings: Settings = Depends(get_app_settings)) -> dict[str, str]:
        return {"version": __version__, "environment": settings.environment}

    app.add_api_route("/ai-mentor", invoke_mentor, methods=["POST"])
    app.add_api_route("/ai-mentor", preflight, methods=["OPTIONS"])

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""

    settings: Settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":  # pragma: no cover
    run()
