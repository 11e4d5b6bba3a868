"""Public async client entrypoint."""

from __future__ import annotations

from types import TracebackType
from typing import TypeVar

import httpx

from .async_auth import AsyncAuthorizer
from .async_resource_set import AsyncResourceSet
from .client_shared import validate_client_config
from .config import ClientConfig, UrlTemplates
from .core.async_transport import AsyncTransport
from .core.errors import ClientClosedError, ConfigurationError
from .credentials import Credential

T = TypeVar("T")


class AsyncRestifyClient:
    """Public async API session."""

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: AsyncTransport | None = None,
        auth_client: httpx.AsyncClient | None = None,
    ) -> None:
        validate_client_config(config)
        self._config = config
        self._transport = transport or AsyncTransport(config)
        self._auth_client = auth_client
        self._authorizer: AsyncAuthorizer | None = None
        self._closed = False

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def authorizer(self) -> AsyncAuthorizer:
        self._ensure_open()
        if self._authorizer is None:
            credential = self._config.credential
            if credential is None:
                raise ConfigurationError("a credential with consumer key/secret is required to authorize")
            self._authorizer = AsyncAuthorizer(
                credential.consumer_key,
                credential.consumer_secret,
                client=self._auth_client,
                timeout=self._config.transport.timeout_read_seconds,
            )
        return self._authorizer

    def resource(self, entity_type: type[T], urls: UrlTemplates) -> AsyncResourceSet[T]:
        self._ensure_open()
        return AsyncResourceSet(entity_type, self._config, urls, transport=self._transport)

    async def authorize_first_party(
        self,
        username: str,
        password: str,
        authorize_url: str,
    ) -> Credential:
        return await self.authorizer.authorize_first_party(username, password, authorize_url)

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClientClosedError("AsyncRestifyClient is already closed")

    async def close(self) -> None:
        if self._closed:
            return
        await self._transport.close()
        if self._authorizer is not None:
            await self._authorizer.close()
        self._closed = True

    async def __aenter__(self) -> "AsyncRestifyClient":
        self._ensure_open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        await self.close()
        return False


__all__ = [
    "AsyncRestifyClient",
]
