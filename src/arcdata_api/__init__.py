"""ArcRaiders Data API - cached read-only proxy for the ArcRaiders dataset.

This package republishes the GitHub-hosted ArcRaiders JSON dataset as a
versioned REST API with an edge cache in front of the upstream.

Layers:
    - protocols: Interface contracts (CacheStore, DataSource)
    - repositories: Data access implementations (Redis, GitHub)
    - services: Business logic (type registry, cache keys, fan-out, proxy)
    - handlers: Routing and HTTP handling
    - dto: Data transfer objects (API and upstream contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from arcdata_api.repositories import GitHubRepository, RedisCacheRepository
    from arcdata_api.services import ProxyService, TypeRegistry

    proxy = ProxyService.create(
        cache=RedisCacheRepository.create(),
        source=GitHubRepository.create(),
    )
    result = await proxy.single_file(TypeRegistry.default().resolve("bots"))
    ```

For HTTP API:
    ```python
    from arcdata_api.api.app import app
    ```
"""

from arcdata_api.config import HARD_CEILING, get_redis_client, settings
from arcdata_api.entities import AggregateResult, CachedResponse, ListOnlyResult, RouteKind, RouteType
from arcdata_api.errors import ApiError, UpstreamError
from arcdata_api.handlers import DataHandler, Router
from arcdata_api.protocols import CacheStore, DataSource
from arcdata_api.repositories import GitHubRepository, RedisCacheRepository
from arcdata_api.services import AggregateService, ProxyService, TypeRegistry

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    "HARD_CEILING",
    # Protocols (interfaces)
    "CacheStore",
    "DataSource",
    # Services (business logic)
    "AggregateService",
    "ProxyService",
    "TypeRegistry",
    # Handlers (HTTP)
    "DataHandler",
    "Router",
    # Repositories (data access)
    "GitHubRepository",
    "RedisCacheRepository",
    # Entities (domain models)
    "AggregateResult",
    "CachedResponse",
    "ListOnlyResult",
    "RouteKind",
    "RouteType",
    # Errors
    "ApiError",
    "UpstreamError",
]
