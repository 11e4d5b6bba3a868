"""OAuth1 credential models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(slots=True, frozen=True)
class Credential:
    """Consumer key/secret plus access token/secret for one API user."""

    consumer_key: str
    consumer_secret: str = field(repr=False)
    access_token: str | None = None
    access_token_secret: str | None = field(default=None, repr=False)

    def with_token(self, token: str, token_secret: str) -> "Credential":
        return replace(self, access_token=token, access_token_secret=token_secret)


@dataclass(slots=True, frozen=True)
class RequestToken:
    """Temporary token pair issued by the request-token endpoint."""

    token: str
    token_secret: str = field(repr=False)
    callback_confirmed: bool = False


__all__ = [
    "Credential",
    "RequestToken",
]
