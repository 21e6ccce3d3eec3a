"""Fan-out fetching for collection listings.

List-only mode answers from the directory listing alone. Full mode fetches
one page of item payloads concurrently, with the page size capped so a
single inbound request never issues more than ``HARD_CEILING`` item
fetches. Items that fail to fetch or parse are dropped from the page
rather than failing it.
"""

import asyncio
import json
import logging
from typing import Any

from arcdata_api.config import HARD_CEILING, settings
from arcdata_api.entities import AggregateResult, ListEntry, ListOnlyResult, RouteType
from arcdata_api.errors import UpstreamError
from arcdata_api.protocols import DataSource

logger = logging.getLogger(__name__)

# Marks an item that could not be fetched or parsed; upstream JSON may be null
_FAILED = object()


def item_url(type_name: str, item_id: str) -> str:
    """Relative API path of a collection item."""
    return f"/v1/{type_name}/{item_id}"


def page_link(type_name: str, offset: int, limit: int) -> str:
    """Relative API link to a page of full payloads."""
    return f"/v1/{type_name}?full=true&offset={offset}&limit={limit}"


class AggregateService:
    """Builds list-only and full collection results.

    Example:
        ```python
        aggregator = AggregateService.create(source=GitHubRepository.create())
        ids = await source.list_directory("items")

        page = await aggregator.fetch_aggregate(items_type, ids, full=True, limit=10, offset=20)
        page.count, page.next  # 10, "/v1/items?full=true&offset=30&limit=10"
        ```
    """

    def __init__(
        self,
        source: DataSource,
        max_items: int | None = None,
        concurrency: int | None = None,
    ) -> None:
        """Initialize the aggregate service.

        Args:
            source: Upstream data source (required).
            max_items: Page-size ceiling. Defaults to settings, never above HARD_CEILING.
            concurrency: Maximum in-flight item fetches. Defaults to settings.
        """
        self._source = source
        self._max_items = min(max_items or settings.max_full_items, HARD_CEILING)
        self._concurrency = concurrency or settings.fetch_concurrency

    @classmethod
    def create(
        cls,
        source: DataSource,
        max_items: int | None = None,
        concurrency: int | None = None,
    ) -> "AggregateService":
        """Factory method to create AggregateService with defaults from settings."""
        return cls(source=source, max_items=max_items, concurrency=concurrency)

    @property
    def max_items(self) -> int:
        return self._max_items

    def effective_limit(self, requested: int | None) -> int:
        """Page size actually used for a requested limit."""
        if requested is not None and requested > 0:
            return min(requested, self._max_items)
        return self._max_items

    def list_only(self, route_type: RouteType, ids: list[str]) -> ListOnlyResult:
        """Every id with its item link, in listing order. No upstream calls."""
        return ListOnlyResult(
            type=route_type.name,
            items=[ListEntry(id=item_id, url=item_url(route_type.name, item_id)) for item_id in ids],
        )

    async def fetch_page(
        self,
        route_type: RouteType,
        ids: list[str],
        limit: int | None = None,
        offset: int = 0,
    ) -> AggregateResult:
        """Fetch one page of full item payloads.

        Args:
            route_type: Collection being paged
            ids: All ids of the collection in canonical order
            limit: Requested page size (capped)
            offset: Number of leading ids to skip

        Returns:
            AggregateResult whose items keep listing order, minus failures
        """
        offset = max(offset, 0)
        total = len(ids)
        page_size = self.effective_limit(limit)
        page_ids = ids[offset : offset + page_size]

        semaphore = asyncio.Semaphore(self._concurrency)
        results = await asyncio.gather(
            *(self._fetch_item(route_type, item_id, semaphore) for item_id in page_ids)
        )
        items = [payload for payload in results if payload is not _FAILED]

        if len(items) < len(page_ids):
            logger.info(
                "Dropped %d of %d %s from page at offset %d",
                len(page_ids) - len(items),
                len(page_ids),
                route_type.name,
                offset,
            )

        next_link = None
        if offset + page_size < total:
            next_link = page_link(route_type.name, offset + page_size, page_size)

        prev_link = None
        if offset > 0:
            prev_link = page_link(route_type.name, max(0, offset - page_size), page_size)

        return AggregateResult(
            type=route_type.name,
            total=total,
            offset=offset,
            limit=page_size,
            items=items,
            next=next_link,
            prev=prev_link,
        )

    async def fetch_aggregate(
        self,
        route_type: RouteType,
        ids: list[str],
        full: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> AggregateResult | ListOnlyResult:
        """List-only result, or a page of full payloads when ``full`` is set.

        ``limit`` and ``offset`` only apply to full mode.
        """
        if not full:
            return self.list_only(route_type, ids)
        return await self.fetch_page(route_type, ids, limit=limit, offset=offset)

    async def _fetch_item(
        self,
        route_type: RouteType,
        item_id: str,
        semaphore: asyncio.Semaphore,
    ) -> Any:
        path = f"{route_type.location}/{item_id}.json"
        async with semaphore:
            try:
                body = await self._source.fetch_raw(path)
            except UpstreamError as e:
                logger.debug("Skipping %s/%s: %s", route_type.name, item_id, e)
                return _FAILED

        try:
            return json.loads(body)
        except ValueError:
            logger.warning("Skipping %s/%s: upstream body is not JSON", route_type.name, item_id)
            return _FAILED
