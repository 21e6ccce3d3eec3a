"""Cache-fronted proxy service.

This service answers the data routes by coordinating the cache store,
the upstream data source and the aggregate service. A cache hit is
returned as stored; on a miss the response is built from upstream and
returned together with the key it should be stored under. Storing is a
separate step (``store``) that the caller runs after the response has
been handed over.
"""

import logging
from dataclasses import dataclass

from arcdata_api.config import settings
from arcdata_api.dto import AggregateData, FullListResponse, ListItem, ListResponse
from arcdata_api.entities import AggregateResult, CachedResponse, ListOnlyResult, RouteType
from arcdata_api.errors import DataNotFound, ItemNotFound, UpstreamError, UpstreamFailure, UpstreamNotFound
from arcdata_api.protocols import CacheStore, DataSource
from arcdata_api.responses import cacheable, render_json
from arcdata_api.services.aggregate_service import AggregateService
from arcdata_api.services.cache_keys import full_variant, key_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProxyResult:
    """A response plus where it lives in the cache.

    Attributes:
        key: Cache key for this request
        response: Status, headers and body to send
        cached: True if served from the cache (nothing to store)
    """

    key: str
    response: CachedResponse
    cached: bool = False


class ProxyService:
    """Core proxy orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - CacheStore: Redis, in-memory, etc.
    - DataSource: GitHub, a mirror, a stub in tests

    Example:
        ```python
        source = GitHubRepository.create()
        proxy = ProxyService.create(
            cache=RedisCacheRepository.create(),
            source=source,
        )

        result = await proxy.single_file(registry.resolve("bots"))
        if not result.cached:
            await proxy.store(result)
        ```
    """

    def __init__(
        self,
        cache: CacheStore,
        source: DataSource,
        aggregator: AggregateService,
        ttl: int | None = None,
        stale_while_revalidate: int | None = None,
    ) -> None:
        """Initialize the proxy service.

        Args:
            cache: Cache storage backend (required).
            source: Upstream data source (required).
            aggregator: Fan-out service for collections (required).
            ttl: Freshness window in seconds. Defaults to settings.
            stale_while_revalidate: Stale window in seconds. Defaults to settings.
        """
        self._cache = cache
        self._source = source
        self._aggregator = aggregator
        self._ttl = ttl or settings.cache_ttl
        self._swr = settings.stale_while_revalidate if stale_while_revalidate is None else stale_while_revalidate

    @classmethod
    def create(
        cls,
        cache: CacheStore,
        source: DataSource,
        aggregator: AggregateService | None = None,
        ttl: int | None = None,
        stale_while_revalidate: int | None = None,
    ) -> "ProxyService":
        """Factory method to create ProxyService with sensible defaults.

        Args:
            cache: Cache storage backend (required).
            source: Upstream data source (required).
            aggregator: Fan-out service. If None, one is built over ``source``.
            ttl: Freshness window. If None, uses settings.
            stale_while_revalidate: Stale window. If None, uses settings.

        Returns:
            Configured ProxyService instance
        """
        return cls(
            cache=cache,
            source=source,
            aggregator=aggregator or AggregateService.create(source=source),
            ttl=ttl,
            stale_while_revalidate=stale_while_revalidate,
        )

    async def single_file(self, route_type: RouteType) -> ProxyResult:
        """Pass through a single-file type.

        Raises:
            DataNotFound: Upstream has no such file
            UpstreamFailure: Upstream could not be read
        """
        key = key_for(self._source.raw_url(route_type.location))
        hit = await self._lookup(key)
        if hit is not None:
            return ProxyResult(key=key, response=hit, cached=True)

        try:
            body = await self._source.fetch_raw(route_type.location)
        except UpstreamNotFound as e:
            raise DataNotFound(route_type.name) from e
        except UpstreamError as e:
            raise UpstreamFailure() from e

        return ProxyResult(key=key, response=self._cacheable(body))

    async def item(self, route_type: RouteType, item_id: str) -> ProxyResult:
        """Pass through one item of a collection.

        Raises:
            ItemNotFound: Upstream has no such item
            UpstreamFailure: Upstream could not be read
        """
        path = f"{route_type.location}/{item_id}.json"
        key = key_for(self._source.raw_url(path))
        hit = await self._lookup(key)
        if hit is not None:
            return ProxyResult(key=key, response=hit, cached=True)

        try:
            body = await self._source.fetch_raw(path)
        except UpstreamNotFound as e:
            raise ItemNotFound(route_type.name, item_id) from e
        except UpstreamError as e:
            raise UpstreamFailure() from e

        return ProxyResult(key=key, response=self._cacheable(body))

    async def collection(
        self,
        route_type: RouteType,
        full: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> ProxyResult:
        """List a collection, or return a page of full item payloads.

        Raises:
            UpstreamFailure: The directory listing could not be read
        """
        variant = None
        if full:
            variant = full_variant(max(offset, 0), self._aggregator.effective_limit(limit))
        key = key_for(self._source.listing_url(route_type.location), variant)

        hit = await self._lookup(key)
        if hit is not None:
            return ProxyResult(key=key, response=hit, cached=True)

        try:
            ids = await self._source.list_directory(route_type.location)
        except UpstreamError as e:
            raise UpstreamFailure(listing=route_type.name) from e

        result = await self._aggregator.fetch_aggregate(route_type, ids, full=full, limit=limit, offset=offset)
        body = render_json(self._to_payload(result))
        return ProxyResult(key=key, response=self._cacheable(body))

    async def store(self, result: ProxyResult) -> None:
        """Populate the cache from a fresh result.

        Meant to run after the response is sent. Failures are logged and
        never raised.
        """
        if result.cached or result.response.status != 200:
            return
        try:
            await self._cache.put(result.key, result.response, self._ttl)
        except Exception:
            logger.exception("Cache store failed for %s", result.key)

    async def _lookup(self, key: str) -> CachedResponse | None:
        try:
            return await self._cache.get(key)
        except Exception:
            logger.exception("Cache lookup failed for %s, treating as miss", key)
            return None

    def _cacheable(self, body: bytes) -> CachedResponse:
        return cacheable(body, self._ttl, self._swr)

    @staticmethod
    def _to_payload(result: AggregateResult | ListOnlyResult) -> dict:
        if isinstance(result, ListOnlyResult):
            return ListResponse(
                type=result.type,
                count=result.count,
                items=[ListItem(id=entry.id, url=entry.url) for entry in result.items],
            ).model_dump()

        payload = FullListResponse(
            data=AggregateData(
                type=result.type,
                total=result.total,
                count=result.count,
                offset=result.offset,
                limit=result.limit,
                items=result.items,
                next=result.next,
                prev=result.prev,
            )
        ).model_dump()
        for link in ("next", "prev"):
            if payload["data"][link] is None:
                del payload["data"][link]
        return payload

    @property
    def ttl(self) -> int:
        """Freshness window in seconds."""
        return self._ttl
