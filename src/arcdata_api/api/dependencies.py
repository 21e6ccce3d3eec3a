"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Collaborators may be pre-seeded in app.state (tests do this)
    - Anything missing is built during lifespan
    - Dependency functions retrieve from request.app.state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from arcdata_api.config import settings
from arcdata_api.handlers import DataHandler, Router
from arcdata_api.repositories import GitHubRepository, RedisCacheRepository
from arcdata_api.services import AggregateService, ProxyService, TypeRegistry


def get_handler(request: Request) -> DataHandler:
    """Dependency injection for DataHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "data_handler", None)
    if handler is None:
        raise RuntimeError("DataHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Repositories (cache store, data source) - reused if pre-seeded
    2. Services (registry, aggregator, proxy)
    3. Handler - stored in app.state.data_handler

    Cleanup:
        Closes the clients this lifespan created and removes services
        from app.state on shutdown
    """
    logging.basicConfig(level=settings.log_level)

    cache_store = getattr(app.state, "cache_store", None)
    owns_cache = cache_store is None
    if owns_cache:
        cache_store = RedisCacheRepository.create()

    data_source = getattr(app.state, "data_source", None)
    owns_source = data_source is None
    if owns_source:
        data_source = GitHubRepository.create()

    registry = TypeRegistry.default()
    aggregator = AggregateService.create(source=data_source)
    proxy_service = ProxyService.create(cache=cache_store, source=data_source, aggregator=aggregator)
    data_handler = DataHandler(router=Router(registry), proxy=proxy_service)

    app.state.cache_store = cache_store
    app.state.data_source = data_source
    app.state.data_handler = data_handler

    print("✓ Data API initialized")
    print(f"✓ Upstream: {settings.github_raw_base}")
    print(f"✓ Cache TTL: {proxy_service.ttl}s, full pages capped at {aggregator.max_items} items")
    print(f"✓ Cache healthy: {await cache_store.health_check()}")

    yield

    if owns_source:
        await data_source.close()
        del app.state.data_source
    if owns_cache:
        await cache_store.close()
        del app.state.cache_store

    del app.state.data_handler
    print("✓ Data API shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[DataHandler, Depends(get_handler)]
