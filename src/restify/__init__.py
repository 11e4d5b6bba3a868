"""Public package exports for the restify client."""

from .async_auth import AsyncAuthorizer
from .async_client import AsyncRestifyClient
from .async_resource_set import AsyncResourceSet
from .auth import Authorizer
from .client import RestifyClient
from .config import ClientConfig, ContentType, TransportConfig, UrlTemplates
from .core.errors import (
    ApiAccessError,
    ClientClosedError,
    ConfigurationError,
    InvalidUrlError,
    NotConfiguredError,
    RestifyError,
    SerializationError,
    TypeNotAllowedError,
)
from .core.serialization import api_field
from .credentials import Credential, RequestToken
from .query import QueryObject, map_to_query_pairs, query_field, to_query_string
from .resource_set import ResourceSet

__all__ = [
    "RestifyClient",
    "AsyncRestifyClient",
    "ResourceSet",
    "AsyncResourceSet",
    "Authorizer",
    "AsyncAuthorizer",
    "ClientConfig",
    "ContentType",
    "TransportConfig",
    "UrlTemplates",
    "Credential",
    "RequestToken",
    "QueryObject",
    "query_field",
    "api_field",
    "map_to_query_pairs",
    "to_query_string",
    "RestifyError",
    "ConfigurationError",
    "NotConfiguredError",
    "InvalidUrlError",
    "TypeNotAllowedError",
    "ApiAccessError",
    "SerializationError",
    "ClientClosedError",
]
