"""Generic resource set: CRUD operations for one entity type."""

from __future__ import annotations

from collections.abc import Mapping
from types import TracebackType
from typing import Any, Generic, TypeVar

from .client_shared import validate_client_config, validate_url_templates
from .config import ClientConfig, UrlTemplates
from .core.models import ApiResponse, TransportResponse
from .core.transport import SyncTransport
from .resource_shared import (
    PreparedRequest,
    ResourceContext,
    complete_response,
    prepare_create,
    prepare_create_file,
    prepare_delete,
    prepare_get,
    prepare_get_by_url,
    prepare_list,
    prepare_request,
    prepare_search,
    prepare_update,
    prepare_update_file,
    render_body,
)

T = TypeVar("T")


class ResourceSet(Generic[T]):
    """List/get/search/create/update/delete for one entity type.

    Each operation resolves its URL template, performs exactly one request and
    either returns the decoded payload or raises. Templates that were never
    configured raise ``NotConfiguredError`` before any request is made; a
    response status above 300 raises ``ApiAccessError``.

    Every operation takes an optional ``params`` mapping appended to the query
    string of that call only. Use :meth:`with_params` for parameters that
    should go out with every request.
    """

    def __init__(
        self,
        entity_type: type[T],
        config: ClientConfig,
        urls: UrlTemplates,
        *,
        transport: SyncTransport | None = None,
    ) -> None:
        validate_client_config(config)
        validate_url_templates(urls)
        self._entity_type = entity_type
        self._context = ResourceContext(config=config, urls=urls)
        self._owns_transport = transport is None
        self._transport = transport or SyncTransport(config)

    @classmethod
    def _from_context(
        cls,
        entity_type: type[T],
        context: ResourceContext,
        transport: SyncTransport,
    ) -> "ResourceSet[T]":
        resource_set = cls(entity_type, context.config, context.urls, transport=transport)
        resource_set._context = context
        return resource_set

    @property
    def entity_type(self) -> type[T]:
        return self._entity_type

    @property
    def config(self) -> ClientConfig:
        return self._context.config

    @property
    def urls(self) -> UrlTemplates:
        return self._context.urls

    @property
    def extra_params(self) -> tuple[tuple[str, str], ...]:
        return self._context.extra_params

    def with_params(self, params: Mapping[str, str]) -> "ResourceSet[T]":
        """Copy of this resource set that sends ``params`` on every request."""

        return self._from_context(
            self._entity_type,
            self._context.with_params(params),
            self._transport,
        )

    def list(
        self,
        parent_id: str | None = None,
        *,
        params: Mapping[str, str] | None = None,
    ) -> list[T]:
        request = prepare_list(self._context, parent_id, params)
        return self._send(request, list[self._entity_type]) or []

    def get(
        self,
        id: str,
        *,
        parent_id: str | None = None,
        params: Mapping[str, str] | None = None,
    ) -> T:
        request = prepare_get(self._context, id, parent_id, params)
        return self._send(request, self._entity_type)

    def get_by_url(self, url: str, *, params: Mapping[str, str] | None = None) -> T:
        request = prepare_get_by_url(self._context, url, params)
        return self._send(request, self._entity_type)

    def search(
        self,
        query: Any,
        result_type: Any = None,
        *,
        params: Mapping[str, str] | None = None,
    ) -> Any:
        request = prepare_search(self._context, query, params)
        return self._send(request, result_type or list[self._entity_type])

    def create(
        self,
        entity: T,
        url: str | None = None,
        *,
        params: Mapping[str, str] | None = None,
    ) -> T:
        request = prepare_create(self._context, entity, url, params)
        return self._send(request, self._entity_type)

    def create_file(
        self,
        data: bytes,
        url: str | None = None,
        *,
        field_name: str = "stream",
        file_name: str = "",
        result_type: Any = None,
        params: Mapping[str, str] | None = None,
    ) -> Any:
        request = prepare_create_file(self._context, data, url, field_name, file_name, params)
        return self._send(request, result_type or bool)

    def update(
        self,
        entity: T,
        id: str,
        *,
        params: Mapping[str, str] | None = None,
    ) -> T:
        request = prepare_update(self._context, entity, id, params)
        return self._send(request, self._entity_type)

    def update_file(
        self,
        data: bytes,
        id: str,
        *,
        field_name: str = "stream",
        file_name: str = "",
        params: Mapping[str, str] | None = None,
    ) -> bool:
        request = prepare_update_file(self._context, data, id, field_name, file_name, params)
        return self._send(request, bool)

    def delete(self, id: str, *, params: Mapping[str, str] | None = None) -> bool:
        request = prepare_delete(self._context, id, params)
        return self._send(request, bool)

    def request(
        self,
        method: str,
        endpoint: str,
        *,
        body: Any = None,
        result_type: Any = None,
        params: Mapping[str, str] | None = None,
    ) -> ApiResponse[Any]:
        """Send an arbitrary request through this resource set's pipeline."""

        prepared = prepare_request(self._context, method, endpoint, body, params)
        response = self._execute(prepared)
        data = complete_response(self._context, prepared, response, result_type or Any)
        return ApiResponse.from_transport(response, data)

    def render_body(self, entity: T) -> str:
        """Body text that :meth:`create` and :meth:`update` send for ``entity``."""

        return render_body(self._context, entity)

    def close(self) -> None:
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> "ResourceSet[T]":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        self.close()
        return False

    def _execute(self, request: PreparedRequest) -> TransportResponse:
        return self._transport.execute(
            request.method,
            request.endpoint,
            params=request.params,
            headers=request.headers,
            content=request.content,
            files=request.files,
            timeout=request.timeout,
        )

    def _send(self, request: PreparedRequest, result_type: Any) -> Any:
        response = self._execute(request)
        return complete_response(self._context, request, response, result_type)


__all__ = [
    "ResourceSet",
]
