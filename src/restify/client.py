"""Public client entrypoint."""

from __future__ import annotations

from types import TracebackType
from typing import TypeVar

import httpx

from .auth import Authorizer
from .client_shared import validate_client_config
from .config import ClientConfig, UrlTemplates
from .core.errors import ClientClosedError, ConfigurationError
from .core.transport import SyncTransport
from .credentials import Credential
from .resource_set import ResourceSet

T = TypeVar("T")


class RestifyClient:
    """One API session: a base URL, a credential and a shared transport.

    Resource sets created through :meth:`resource` share this client's
    transport and stop working once the client is closed.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: SyncTransport | None = None,
        auth_client: httpx.Client | None = None,
    ) -> None:
        validate_client_config(config)
        self._config = config
        self._transport = transport or SyncTransport(config)
        self._auth_client = auth_client
        self._authorizer: Authorizer | None = None
        self._closed = False

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def authorizer(self) -> Authorizer:
        self._ensure_open()
        if self._authorizer is None:
            credential = self._config.credential
            if credential is None:
                raise ConfigurationError("a credential with consumer key/secret is required to authorize")
            self._authorizer = Authorizer(
                credential.consumer_key,
                credential.consumer_secret,
                client=self._auth_client,
                timeout=self._config.transport.timeout_read_seconds,
            )
        return self._authorizer

    def resource(self, entity_type: type[T], urls: UrlTemplates) -> ResourceSet[T]:
        self._ensure_open()
        return ResourceSet(entity_type, self._config, urls, transport=self._transport)

    def authorize_first_party(self, username: str, password: str, authorize_url: str) -> Credential:
        return self.authorizer.authorize_first_party(username, password, authorize_url)

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClientClosedError("RestifyClient is already closed")

    def close(self) -> None:
        if self._closed:
            return
        self._transport.close()
        if self._authorizer is not None:
            self._authorizer.close()
        self._closed = True

    def __enter__(self) -> "RestifyClient":
        self._ensure_open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        self.close()
        return False


__all__ = [
    "RestifyClient",
]
