"""Service layer for business logic.

This layer contains the core proxy logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from arcdata_api.services import ProxyService, TypeRegistry

    registry = TypeRegistry.default()
    proxy = ProxyService.create(cache=cache_store, source=data_source)
    ```
"""

from .aggregate_service import AggregateService
from .cache_keys import full_variant, key_for
from .proxy_service import ProxyResult, ProxyService
from .type_registry import TypeRegistry

__all__ = [
    "AggregateService",
    "ProxyResult",
    "ProxyService",
    "TypeRegistry",
    "full_variant",
    "key_for",
]
