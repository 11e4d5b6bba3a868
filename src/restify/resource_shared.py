"""Request preparation shared by the sync and async resource sets."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from .config import ClientConfig, UrlTemplates
from .core.errors import ApiAccessError, InvalidUrlError, NotConfiguredError, raise_for_response
from .core.models import TransportResponse
from .core.serialization import decode_body, encode_entity
from .query import map_to_query_pairs

logger = logging.getLogger("restify")

QueryPairs = tuple[tuple[str, str], ...]


@dataclass(slots=True, frozen=True)
class PreparedRequest:
    method: str
    endpoint: str
    params: QueryPairs = ()
    headers: Mapping[str, str] = field(default_factory=dict)
    content: bytes | None = None
    files: Mapping[str, Any] | None = None
    timeout: float | None = None


@dataclass(slots=True, frozen=True)
class ResourceContext:
    """Everything a resource set needs to build requests; never mutated."""

    config: ClientConfig
    urls: UrlTemplates
    extra_params: QueryPairs = ()

    def with_params(self, params: Mapping[str, str]) -> "ResourceContext":
        return replace(self, extra_params=self.extra_params + _as_pairs(params))


def _as_pairs(params: Mapping[str, str] | None) -> QueryPairs:
    if not params:
        return ()
    return tuple((str(key), str(value)) for key, value in params.items())


def require_template(urls: UrlTemplates, name: str) -> str:
    if not urls.is_configured(name):
        raise NotConfiguredError(f"The URL template {name} has no value on the resource set.")
    return getattr(urls, name)


def strip_base_url(base_url: str, url: str) -> str:
    """Endpoint part of an absolute ``url`` that must live under ``base_url``."""

    candidate = url.strip()
    prefix = base_url.rstrip("/")
    if len(candidate) <= len(prefix) or not candidate.startswith(prefix):
        raise InvalidUrlError(f"Invalid url: {url}", request_url=url)
    remainder = candidate[len(prefix) :]
    if not remainder.startswith("/") or remainder.strip("/") == "":
        raise InvalidUrlError(f"Invalid url: {url}", request_url=url)
    return remainder


def resolve_create_endpoint(context: ResourceContext, url: str | None) -> str:
    if url is not None and url.strip():
        return strip_base_url(context.config.base_url, url)
    return require_template(context.urls, "create_url")


def build_headers(config: ClientConfig, *, with_content_type: bool = True) -> dict[str, str]:
    headers = {"Accept-Encoding": "gzip,deflate"}
    if with_content_type:
        headers["Content-Type"] = config.content_type.media_type
    headers.update(config.fixed_headers)
    return headers


def build_params(
    context: ResourceContext,
    params: Mapping[str, str] | None,
    query_pairs: QueryPairs = (),
) -> QueryPairs:
    return query_pairs + context.extra_params + _as_pairs(params)


def _prepare(
    context: ResourceContext,
    method: str,
    endpoint: str,
    *,
    params: Mapping[str, str] | None = None,
    query_pairs: QueryPairs = (),
    content: bytes | None = None,
    files: Mapping[str, Any] | None = None,
    timeout: float | None = None,
) -> PreparedRequest:
    return PreparedRequest(
        method=method,
        endpoint=endpoint,
        params=build_params(context, params, query_pairs),
        headers=build_headers(context.config, with_content_type=files is None),
        content=content,
        files=files,
        timeout=timeout,
    )


def _file_part(data: bytes, field_name: str, file_name: str) -> dict[str, Any]:
    return {field_name: (file_name or field_name, data, "application/octet-stream")}


def prepare_list(
    context: ResourceContext,
    parent_id: str | None,
    params: Mapping[str, str] | None,
) -> PreparedRequest:
    if parent_id is None:
        endpoint = require_template(context.urls, "list_url")
    else:
        endpoint = require_template(context.urls, "child_list_url").format(parent_id)
    return _prepare(context, "GET", endpoint, params=params)


def prepare_get(
    context: ResourceContext,
    id: str,
    parent_id: str | None,
    params: Mapping[str, str] | None,
) -> PreparedRequest:
    if parent_id is None:
        endpoint = require_template(context.urls, "get_url").format(id)
    else:
        endpoint = require_template(context.urls, "child_url").format(parent_id, id)
    return _prepare(context, "GET", endpoint, params=params)


def prepare_get_by_url(
    context: ResourceContext,
    url: str,
    params: Mapping[str, str] | None,
) -> PreparedRequest:
    endpoint = strip_base_url(context.config.base_url, url)
    return _prepare(context, "GET", endpoint, params=params)


def prepare_search(
    context: ResourceContext,
    query: Any,
    params: Mapping[str, str] | None,
) -> PreparedRequest:
    endpoint = require_template(context.urls, "search_url")
    query_pairs = tuple(map_to_query_pairs(query))
    return _prepare(context, "GET", endpoint, params=params, query_pairs=query_pairs)


def prepare_create(
    context: ResourceContext,
    entity: Any,
    url: str | None,
    params: Mapping[str, str] | None,
) -> PreparedRequest:
    endpoint = resolve_create_endpoint(context, url)
    return _prepare(
        context,
        "POST",
        endpoint,
        params=params,
        content=encode_entity(entity, context.config.content_type),
        timeout=context.config.transport.create_timeout_seconds,
    )


def prepare_create_file(
    context: ResourceContext,
    data: bytes,
    url: str | None,
    field_name: str,
    file_name: str,
    params: Mapping[str, str] | None,
) -> PreparedRequest:
    endpoint = resolve_create_endpoint(context, url)
    return _prepare(
        context,
        "POST",
        endpoint,
        params=params,
        files=_file_part(data, field_name, file_name),
    )


def prepare_update(
    context: ResourceContext,
    entity: Any,
    id: str,
    params: Mapping[str, str] | None,
) -> PreparedRequest:
    endpoint = require_template(context.urls, "edit_url").format(id)
    return _prepare(
        context,
        "PUT",
        endpoint,
        params=params,
        content=encode_entity(entity, context.config.content_type),
    )


def prepare_update_file(
    context: ResourceContext,
    data: bytes,
    id: str,
    field_name: str,
    file_name: str,
    params: Mapping[str, str] | None,
) -> PreparedRequest:
    endpoint = require_template(context.urls, "edit_url").format(id)
    return _prepare(
        context,
        "PUT",
        endpoint,
        params=params,
        files=_file_part(data, field_name, file_name),
    )


def prepare_delete(
    context: ResourceContext,
    id: str,
    params: Mapping[str, str] | None,
) -> PreparedRequest:
    endpoint = require_template(context.urls, "edit_url").format(id)
    return _prepare(context, "DELETE", endpoint, params=params)


def prepare_request(
    context: ResourceContext,
    method: str,
    endpoint: str,
    body: Any,
    params: Mapping[str, str] | None,
) -> PreparedRequest:
    content = None if body is None else encode_entity(body, context.config.content_type)
    return _prepare(context, method.upper(), endpoint, params=params, content=content)


def complete_response(
    context: ResourceContext,
    request: PreparedRequest,
    response: TransportResponse,
    result_type: Any,
) -> Any:
    """Apply the status policy, then decode the body as ``result_type``."""

    try:
        raise_for_response(response)
    except ApiAccessError:
        logger.error(
            "request failed method=%s endpoint=%s http_status=%s",
            request.method,
            request.endpoint,
            response.status_code,
        )
        raise
    logger.info(
        "request success method=%s endpoint=%s http_status=%s",
        request.method,
        request.endpoint,
        response.status_code,
    )
    if result_type is bool:
        return response.status_code < 300
    return decode_body(response.content, context.config.content_type, result_type)


def render_body(context: ResourceContext, entity: Any) -> str:
    return encode_entity(entity, context.config.content_type).decode("utf-8")


__all__ = [
    "QueryPairs",
    "PreparedRequest",
    "ResourceContext",
    "require_template",
    "strip_base_url",
    "resolve_create_endpoint",
    "build_headers",
    "build_params",
    "prepare_list",
    "prepare_get",
    "prepare_get_by_url",
    "prepare_search",
    "prepare_create",
    "prepare_create_file",
    "prepare_update",
    "prepare_update_file",
    "prepare_delete",
    "prepare_request",
    "complete_response",
    "render_body",
]
