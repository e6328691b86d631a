"""Error taxonomy shared by every exchange facade."""

from __future__ import annotations

from typing import Any


class ExchangeError(Exception):
    """Base class for all errors raised by cointrade."""


class CredentialError(ExchangeError):
    """Credentials are missing or empty."""


class EndpointNotFound(ExchangeError):
    """Operation name is not registered for a provider."""

    def __init__(self, provider: str, operation: str):
        super().__init__(f"{provider}: endpoint not found for operation '{operation}'")
        self.provider = provider
        self.operation = operation


class SigningError(ExchangeError):
    """Key material was rejected by the signing primitive."""


class UnsupportedContentType(ExchangeError):
    """Request builder was asked for a content type it cannot encode."""

    def __init__(self, content_type: str):
        super().__init__(f"Unsupported Content-Type: {content_type}")
        self.content_type = content_type


class TransportError(ExchangeError):
    """Network failure reported by the HTTP sender."""


class TransportTimeout(TransportError):
    """HTTP sender gave up waiting for the exchange."""


class MalformedResponse(ExchangeError):
    """Provider response could not be normalized."""

    def __init__(self, message: str, field: str | None = None):
        if field:
            message = f"{message} (field: {field})"
        super().__init__(message)
        self.field = field


class RequestValidationError(ExchangeError):
    """Caller supplied a payload the facade cannot use."""


class ExchangeAPIError(ExchangeError):
    """Exchange answered with an error status or error code."""

    def __init__(self, provider: str, status: int, message: str, payload: Any = None):
        super().__init__(f"{provider} API error (HTTP {status}): {message}")
        self.provider = provider
        self.status = status
        self.payload = payload
