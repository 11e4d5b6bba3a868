"""Shared helpers for sync/async transport implementations."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import httpx
from authlib.integrations.httpx_client import OAuth1Auth

from ..config import ClientConfig
from ..credentials import Credential
from .models import TransportResponse

QueryParams = Mapping[str, str] | Sequence[tuple[str, str]]


def build_default_headers(config: ClientConfig) -> Mapping[str, str]:
    return {
        "Accept-Encoding": "gzip,deflate",
        "User-Agent": config.user_agent,
    }


def build_default_timeout(config: ClientConfig) -> httpx.Timeout:
    return httpx.Timeout(
        connect=config.transport.timeout_connect_seconds,
        read=config.transport.timeout_read_seconds,
        write=config.transport.timeout_write_seconds,
        pool=config.transport.timeout_pool_seconds,
    )


def build_oauth1_auth(credential: Credential | None) -> OAuth1Auth | None:
    """Protected-resource signing for the four credential fields."""

    if credential is None:
        return None
    return OAuth1Auth(
        client_id=credential.consumer_key,
        client_secret=credential.consumer_secret,
        token=credential.access_token,
        token_secret=credential.access_token_secret,
    )


def normalize_base_url(base_url: str) -> str:
    return base_url.rstrip("/") + "/"


def normalize_endpoint(endpoint: str) -> str:
    return endpoint.lstrip("/")


def resolve_url(base_url: str, endpoint: str) -> str:
    return normalize_base_url(base_url) + normalize_endpoint(endpoint)


def to_transport_response(response: httpx.Response) -> TransportResponse:
    return TransportResponse(
        status_code=response.status_code,
        reason_phrase=response.reason_phrase,
        content=response.content,
        url=str(response.url),
        headers=dict(response.headers),
    )


def to_failed_transport_response(exc: Exception, *, url: str) -> TransportResponse:
    return TransportResponse(
        status_code=0,
        reason_phrase="",
        content=b"",
        url=url,
        error_message=str(exc) or exc.__class__.__name__,
        error=exc,
    )


__all__ = [
    "QueryParams",
    "build_default_headers",
    "build_default_timeout",
    "build_oauth1_auth",
    "normalize_base_url",
    "normalize_endpoint",
    "resolve_url",
    "to_transport_response",
    "to_failed_transport_response",
]
