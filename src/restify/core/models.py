"""Core response models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class TransportResponse:
    status_code: int
    reason_phrase: str
    content: bytes
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    error_message: str | None = None
    error: BaseException | None = field(default=None, repr=False, compare=False)

    @property
    def is_success(self) -> bool:
        return self.status_code < 300 and not self.error_message


@dataclass(slots=True, frozen=True)
class ApiResponse(Generic[T]):
    """Decoded result of one resource set call."""

    status_code: int
    raw_body: bytes
    data: T | None
    request_url: str

    @classmethod
    def from_transport(cls, response: TransportResponse, data: T | None) -> "ApiResponse[T]":
        return cls(
            status_code=response.status_code,
            raw_body=response.content,
            data=data,
            request_url=response.url,
        )


__all__ = [
    "TransportResponse",
    "ApiResponse",
]
