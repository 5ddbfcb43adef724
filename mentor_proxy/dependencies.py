"""Dependency providers for the FastAPI application."""

from starlette.requests import HTTPConnection

from mentor_proxy.config import Settings
from mentor_proxy.services.gemini_service import GeminiService


async def get_app_settings(connection: HTTPConnection) -> Settings:
    """Return the settings the application was constructed with."""

    return connection.app.state.settings  # type: ignore[return-value]


async def get_gemini_service(connection: HTTPConnection) -> GeminiService:
    """Return the provider service built at startup.

    Raises the ConfigurationError recorded during startup when the provider
    credential was missing.
    """

    service = connection.app.state.gemini_service
    if service is None:
        raise connection.app.state.configuration_error
    return service
