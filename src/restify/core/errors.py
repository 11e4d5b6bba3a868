"""Error types and status mapping."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import TransportResponse


class RestifyError(Exception):
    """Base exception for this package."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
        request_url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.request_url = request_url


class ConfigurationError(RestifyError):
    """Client configuration rejected by validation."""


class NotConfiguredError(RestifyError):
    """Operation invoked without its URL template."""


class InvalidUrlError(RestifyError):
    """Absolute URL that does not belong to the configured base URL."""


class TypeNotAllowedError(RestifyError):
    """Query object field whose type cannot become a query parameter."""

    def __init__(self, message: str, *, field_name: str, field_type: object) -> None:
        super().__init__(message)
        self.field_name = field_name
        self.field_type = field_type


class ApiAccessError(RestifyError):
    """Remote API rejected the request or the transport failed."""


class SerializationError(RestifyError):
    """Body could not be encoded or decoded in the configured content type."""


class ClientClosedError(RestifyError):
    """Raised when client is used after close."""


def evaluate_response(response: "TransportResponse") -> ApiAccessError | None:
    """Map a transport response to the access error it represents, if any.

    Anything above 300 is a failure; 300 itself is not.
    """

    if response.status_code > 300:
        return ApiAccessError(
            response.reason_phrase or f"HTTP {response.status_code}",
            status_code=response.status_code,
            reason=response.reason_phrase,
            request_url=response.url,
        )
    if response.error_message:
        return ApiAccessError(
            response.error_message,
            status_code=response.status_code,
            reason=response.error_message,
            request_url=response.url,
        )
    return None


def raise_for_response(response: "TransportResponse") -> None:
    error = evaluate_response(response)
    if error is None:
        return
    if response.error is not None:
        raise error from response.error
    raise error


__all__ = [
    "RestifyError",
    "ConfigurationError",
    "NotConfiguredError",
    "InvalidUrlError",
    "TypeNotAllowedError",
    "ApiAccessError",
    "SerializationError",
    "ClientClosedError",
    "evaluate_response",
    "raise_for_response",
]
