"""Sync HTTP transport with OAuth1 signing and failure capture."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from ..config import ClientConfig
from .errors import ClientClosedError
from .models import TransportResponse
from .transport_shared import (
    QueryParams,
    build_default_headers,
    build_default_timeout,
    build_oauth1_auth,
    normalize_base_url,
    normalize_endpoint,
    resolve_url,
    to_failed_transport_response,
    to_transport_response,
)

logger = logging.getLogger("restify")


class SyncTransport:
    """Synchronous transport executing one request per call, without retry."""

    def __init__(
        self,
        config: ClientConfig,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self._config = config
        self._closed = False
        self._auth = build_oauth1_auth(config.credential)
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=normalize_base_url(config.base_url),
            headers=build_default_headers(config),
            timeout=build_default_timeout(config),
        )

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_client:
            self._client.close()

    def execute(
        self,
        method: str,
        endpoint: str,
        *,
        params: QueryParams | None = None,
        headers: Mapping[str, str] | None = None,
        content: bytes | None = None,
        files: Mapping[str, Any] | None = None,
        timeout: float | None = None,
    ) -> TransportResponse:
        if self._closed:
            raise ClientClosedError("transport is already closed")

        normalized_endpoint = normalize_endpoint(endpoint)
        logger.debug("request start method=%s endpoint=%s", method, normalized_endpoint)
        try:
            response = self._client.request(
                method,
                normalized_endpoint,
                params=params,
                headers=headers,
                content=content,
                files=files,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
                auth=self._auth if self._auth is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.RequestError as exc:
            logger.warning(
                "request transport error method=%s endpoint=%s error=%s",
                method,
                normalized_endpoint,
                exc.__class__.__name__,
            )
            return to_failed_transport_response(
                exc,
                url=resolve_url(self._config.base_url, normalized_endpoint),
            )

        logger.debug(
            "response received method=%s endpoint=%s http_status=%s",
            method,
            normalized_endpoint,
            response.status_code,
        )
        return to_transport_response(response)


__all__ = [
    "SyncTransport",
]
