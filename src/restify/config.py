"""Client configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from urllib.parse import urlsplit

from .credentials import Credential

DEFAULT_USER_AGENT = "restify-client/0.1.0"


class ContentType(Enum):
    """Wire format used for request and response bodies."""

    XML = 1
    JSON = 2

    @property
    def media_type(self) -> str:
        if self is ContentType.JSON:
            return "application/json"
        return "application/xml"


@dataclass(slots=True, frozen=True)
class TransportConfig:
    """Transport-related settings."""

    timeout_connect_seconds: float = 5.0
    timeout_read_seconds: float = 30.0
    timeout_write_seconds: float = 30.0
    timeout_pool_seconds: float = 5.0
    create_timeout_seconds: float = 20.0

    def validate(self) -> None:
        for field_name in (
            "timeout_connect_seconds",
            "timeout_read_seconds",
            "timeout_write_seconds",
            "timeout_pool_seconds",
            "create_timeout_seconds",
        ):
            if getattr(self, field_name) <= 0:
                raise ValueError(f"transport.{field_name} must be > 0")


@dataclass(slots=True, frozen=True)
class UrlTemplates:
    """Per-operation URL templates, relative to the client base URL.

    Placeholders are positional (``{0}``, ``{1}``) and receive the parent id
    and/or entity id at call time, e.g. ``/customers/{0}/orders/{1}``.
    """

    list_url: str | None = None
    child_list_url: str | None = None
    get_url: str | None = None
    child_url: str | None = None
    create_url: str | None = None
    edit_url: str | None = None
    search_url: str | None = None

    def validate(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"urls.{item.name} must be str or None")

    def is_configured(self, name: str) -> bool:
        value = getattr(self, name)
        return value is not None and value.strip() != ""


@dataclass(slots=True, frozen=True)
class ClientConfig:
    """Runtime configuration shared by every resource set of one API session."""

    base_url: str
    content_type: ContentType = ContentType.XML
    credential: Credential | None = None
    fixed_headers: Mapping[str, str] = field(default_factory=dict)
    user_agent: str = DEFAULT_USER_AGENT

    transport: TransportConfig = field(default_factory=TransportConfig)

    def validate(self) -> None:
        if not self.base_url or not self.base_url.strip():
            raise ValueError("base_url must not be empty")
        parts = urlsplit(self.base_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError("base_url must be an absolute http(s) URL")
        if not isinstance(self.content_type, ContentType):
            raise ValueError("content_type must be ContentType")
        if self.credential is not None and not isinstance(self.credential, Credential):
            raise ValueError("credential must be Credential or None")
        for key, value in self.fixed_headers.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ValueError("fixed_headers keys and values must be str")
        self.transport.validate()


__all__ = [
    "DEFAULT_USER_AGENT",
    "ContentType",
    "TransportConfig",
    "UrlTemplates",
    "ClientConfig",
]
