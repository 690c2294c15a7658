from __future__ import annotations

from typing import Optional


class AmazonianError(RuntimeError):
    """Base class for errors raised by the API client."""


class ConfigurationError(AmazonianError):
    """Raised when credentials are missing or an option is unknown."""


class RequestError(AmazonianError):
    """Raised when the API answers with an HTTP error status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        body: Optional[bytes] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.body = body


class TransportError(RequestError):
    """Raised when no HTTP response could be obtained at all."""
