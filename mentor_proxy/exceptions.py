"""Custom exceptions shared across services."""

from dataclasses import dataclass


@dataclass(eq=False)
class ServiceError(Exception):
    """Base exception for service layer failures."""

    message: str
    code: str = "service_error"
    status_code: int | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(eq=False)
class ConfigurationError(ServiceError):
    """Raised when the provider credential is missing from configuration."""

    code: str = "configuration_error"


@dataclass(eq=False)
class InvalidRequestError(ServiceError):
    """Raised when an invocation body is absent or carries no usable prompt."""

    code: str = "invalid_request"


@dataclass(eq=False)
class ProviderTransportError(ServiceError):
    """Raised when the provider cannot be reached or answers with a non-2xx status."""

    code: str = "provider_transport_error"


@dataclass(eq=False)
class ProviderResponseError(ServiceError):
    """Raised when the provider payload lacks the generated text."""

    code: str = "provider_response_error"


@dataclass(eq=False)
class MentorClientError(ServiceError):
    """Raised by MentorClient when the proxy call or its output is unusable."""

    code: str = "mentor_client_error"
