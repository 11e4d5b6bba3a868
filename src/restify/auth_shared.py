"""Shared helpers for the sync/async OAuth1 authorization handshake."""

from __future__ import annotations

import base64
from urllib.parse import parse_qsl

import httpx
from authlib.integrations.httpx_client import OAuth1Auth

from .core.errors import ApiAccessError, SerializationError
from .credentials import Credential, RequestToken


def check_token_response(response: httpx.Response) -> None:
    """Token endpoints must answer 200; anything else is an access error."""

    if response.status_code != 200:
        raise ApiAccessError(
            response.reason_phrase or f"HTTP {response.status_code}",
            status_code=response.status_code,
            reason=response.reason_phrase,
            request_url=str(response.url),
        )


def transport_failure(exc: httpx.RequestError, url: str) -> ApiAccessError:
    return ApiAccessError(str(exc) or exc.__class__.__name__, status_code=0, request_url=url)


def parse_token_body(content: bytes) -> dict[str, str]:
    payload = dict(parse_qsl(content.decode("utf-8").strip(), keep_blank_values=True))
    if not payload.get("oauth_token") or "oauth_token_secret" not in payload:
        raise SerializationError("token response must contain oauth_token and oauth_token_secret")
    return payload


def to_request_token(payload: dict[str, str]) -> RequestToken:
    return RequestToken(
        token=payload["oauth_token"],
        token_secret=payload["oauth_token_secret"],
        callback_confirmed=payload.get("oauth_callback_confirmed", "").lower() == "true",
    )


def to_credential(consumer_key: str, consumer_secret: str, payload: dict[str, str]) -> Credential:
    return Credential(
        consumer_key=consumer_key,
        consumer_secret=consumer_secret,
        access_token=payload["oauth_token"],
        access_token_secret=payload["oauth_token_secret"],
    )


def build_request_token_auth(
    consumer_key: str,
    consumer_secret: str,
    callback_uri: str | None,
) -> OAuth1Auth:
    return OAuth1Auth(
        client_id=consumer_key,
        client_secret=consumer_secret,
        redirect_uri=callback_uri,
    )


def build_access_token_auth(
    consumer_key: str,
    consumer_secret: str,
    request_token: RequestToken,
    verifier: str | None,
) -> OAuth1Auth:
    return OAuth1Auth(
        client_id=consumer_key,
        client_secret=consumer_secret,
        token=request_token.token,
        token_secret=request_token.token_secret,
        verifier=verifier,
    )


def build_client_auth(consumer_key: str, consumer_secret: str) -> OAuth1Auth:
    return OAuth1Auth(client_id=consumer_key, client_secret=consumer_secret)


def build_first_party_form(username: str, password: str) -> dict[str, str]:
    """xAuth client-auth form; ``ec`` is base64 of "username password"."""

    encoded = base64.b64encode(f"{username} {password}".encode("ascii")).decode("ascii")
    return {
        "x_auth_username": username,
        "x_auth_password": password,
        "x_auth_mode": "client_auth",
        "ec": encoded,
    }


__all__ = [
    "check_token_response",
    "transport_failure",
    "parse_token_body",
    "to_request_token",
    "to_credential",
    "build_request_token_auth",
    "build_access_token_auth",
    "build_client_auth",
    "build_first_party_form",
]
