"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services,
handlers and repositories. They are NOT used for API contracts - use
DTOs from the dto package for that.
"""

from .aggregate import AggregateResult, ListEntry, ListOnlyResult
from .cached_response import CachedResponse
from .route_type import RouteKind, RouteType

__all__ = [
    "AggregateResult",
    "CachedResponse",
    "ListEntry",
    "ListOnlyResult",
    "RouteKind",
    "RouteType",
]
