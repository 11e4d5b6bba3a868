"""Async OAuth1 authorization handshake."""

from __future__ import annotations

import logging
from types import TracebackType

import httpx

from .auth_shared import (
    build_access_token_auth,
    build_client_auth,
    build_first_party_form,
    build_request_token_auth,
    check_token_response,
    parse_token_body,
    to_credential,
    to_request_token,
    transport_failure,
)
from .credentials import Credential, RequestToken

logger = logging.getLogger("restify")


class AsyncAuthorizer:
    """Async counterpart of :class:`~restify.auth.Authorizer`."""

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._consumer_key = consumer_key
        self._consumer_secret = consumer_secret
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch_request_token(self, url: str, *, callback_uri: str | None = None) -> RequestToken:
        auth = build_request_token_auth(self._consumer_key, self._consumer_secret, callback_uri)
        payload = await self._post(url, auth=auth)
        return to_request_token(payload)

    async def fetch_access_token(
        self,
        url: str,
        request_token: RequestToken,
        *,
        verifier: str | None = None,
    ) -> Credential:
        auth = build_access_token_auth(
            self._consumer_key,
            self._consumer_secret,
            request_token,
            verifier,
        )
        payload = await self._post(url, auth=auth)
        return to_credential(self._consumer_key, self._consumer_secret, payload)

    async def authorize_first_party(self, username: str, password: str, authorize_url: str) -> Credential:
        auth = build_client_auth(self._consumer_key, self._consumer_secret)
        payload = await self._post(
            authorize_url,
            auth=auth,
            data=build_first_party_form(username, password),
        )
        return to_credential(self._consumer_key, self._consumer_secret, payload)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AsyncAuthorizer":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        await self.close()
        return False

    async def _post(
        self,
        url: str,
        *,
        auth: httpx.Auth,
        data: dict[str, str] | None = None,
    ) -> dict[str, str]:
        logger.debug("token request start url=%s", url)
        try:
            response = await self._client.post(url, auth=auth, data=data)
        except httpx.RequestError as exc:
            logger.warning("token request transport error url=%s error=%s", url, exc.__class__.__name__)
            raise transport_failure(exc, url) from exc
        if response.status_code != 200:
            logger.error("token request failed url=%s http_status=%s", url, response.status_code)
        check_token_response(response)
        return parse_token_body(response.content)


__all__ = [
    "AsyncAuthorizer",
]
