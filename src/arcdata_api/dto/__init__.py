"""Data Transfer Objects for API and upstream contracts.

These Pydantic models define the external shapes: what clients get back,
how the collection query string is read, and what the upstream directory
listing is expected to look like.

Internal domain logic should use entities from the entities package.
"""

from .requests import CollectionQuery
from .responses import (
    AggregateData,
    ApiInfoResponse,
    ErrorResponse,
    FullListResponse,
    ListItem,
    ListResponse,
)
from .upstream import ManifestEntry, parse_manifest

__all__ = [
    "CollectionQuery",
    "AggregateData",
    "ApiInfoResponse",
    "ErrorResponse",
    "FullListResponse",
    "ListItem",
    "ListResponse",
    "ManifestEntry",
    "parse_manifest",
]
