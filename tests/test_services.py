"""
Tests for the registry, cache keys, fan-out and proxy services.
"""

import asyncio
import json

import pytest

from arcdata_api.config import HARD_CEILING, Settings
from arcdata_api.entities import AggregateResult, ListOnlyResult, RouteKind, RouteType
from arcdata_api.errors import (
    DataNotFound,
    InternalFault,
    ItemNotFound,
    UnknownType,
    UpstreamFailure,
    UpstreamUnavailable,
)
from arcdata_api.repositories.github_repository import collation_key, identifiers_from_manifest
from arcdata_api.responses import cache_control
from arcdata_api.services import AggregateService, ProxyService, TypeRegistry, full_variant, key_for
from conftest import API_BASE, ITEM_IDS, RAW_BASE


@pytest.fixture
def registry():
    return TypeRegistry.default()


@pytest.fixture
def items_type(registry):
    return registry.resolve("items")


# Type registry


def test_registry_kinds(registry):
    assert {name for name, t in registry.types.items() if t.is_collection} == {
        "items",
        "hideout",
        "quests",
        "map-events",
    }
    assert registry.resolve("bots") == RouteType("bots", RouteKind.SINGLE_FILE, "bots.json")
    assert registry.resolve("map-events").location == "map-events"


def test_registry_aliases_are_not_types(registry):
    assert registry.resolve("skill-nodes") is registry.resolve("skillNodes")
    assert "skill-nodes" not in registry.types


def test_registry_is_exact_and_case_sensitive(registry):
    assert registry.resolve("Items") is None
    assert registry.resolve("item") is None
    assert registry.resolve_collection("bots") is None
    assert registry.resolve_collection("quests").name == "quests"


def test_registry_is_read_only(registry):
    with pytest.raises(TypeError):
        registry.types["weapons"] = RouteType("weapons", RouteKind.COLLECTION, "weapons")


def test_registry_rejects_dangling_alias():
    with pytest.raises(ValueError):
        TypeRegistry([RouteType("bots", RouteKind.SINGLE_FILE, "bots.json")], {"robots": "droids"})


# Cache keys


def test_cache_keys():
    assert key_for(f"{RAW_BASE}/bots.json") == f"{RAW_BASE}/bots.json"
    assert key_for(f"{API_BASE}/items", None) == f"{API_BASE}/items"
    assert key_for(f"{API_BASE}/items", full_variant(0, 45)) == f"{API_BASE}/items?full=true&offset=0&limit=45"


def test_cache_keys_distinguish_pages():
    keys = {
        key_for(f"{API_BASE}/items"),
        key_for(f"{API_BASE}/items", full_variant(0, 10)),
        key_for(f"{API_BASE}/items", full_variant(10, 10)),
        key_for(f"{API_BASE}/items", full_variant(0, 20)),
    }
    assert len(keys) == 4


def test_alias_and_canonical_share_key(registry, source):
    alias = registry.resolve("skill-nodes")
    canonical = registry.resolve("skillNodes")
    assert key_for(source.raw_url(alias.location)) == key_for(source.raw_url(canonical.location))


# Manifest parsing


def test_manifest_filtering_and_order():
    manifest = [
        {"name": "item2.json", "type": "file"},
        {"name": "item10.json", "type": "file"},
        {"name": "item-a.json", "type": "file"},
        {"name": "item_b.json", "type": "file"},
        {"name": "alpha.json", "type": "file", "sha": "abc"},
        {"name": "_meta.json", "type": "file"},
        {"name": "notes.md", "type": "file"},
        {"name": "archive.json", "type": "dir"},
        {"name": "data.json.bak", "type": "file"},
    ]
    assert identifiers_from_manifest(manifest) == ["alpha", "item_b", "item-a", "item10", "item2"]


def test_collation_ignores_case_at_primary_level():
    assert sorted(["b", "A", "a", "B"], key=collation_key) == ["a", "A", "b", "B"]
    assert sorted(["Anvil", "anvil", "ANVIL"], key=collation_key) == ["anvil", "Anvil", "ANVIL"]
    assert sorted(["item", "item_x", "ite"], key=collation_key) == ["ite", "item", "item_x"]


@pytest.mark.parametrize("payload", [{"message": "Not Found"}, [{"name": 1}], "nope", None])
def test_manifest_shape_mismatch(payload):
    with pytest.raises(UpstreamUnavailable):
        identifiers_from_manifest(payload)


# Aggregate service


def test_effective_limit(source):
    aggregator = AggregateService(source, max_items=HARD_CEILING)
    assert aggregator.effective_limit(None) == HARD_CEILING
    assert aggregator.effective_limit(0) == HARD_CEILING
    assert aggregator.effective_limit(10) == 10
    assert aggregator.effective_limit(1000) == HARD_CEILING


def test_max_items_never_exceeds_ceiling(source):
    assert AggregateService(source, max_items=500).max_items == HARD_CEILING
    assert AggregateService(source, max_items=5).effective_limit(20) == 5


def test_list_only_ignores_paging(source, upstream, items_type):
    aggregator = AggregateService(source)
    result = asyncio.run(aggregator.fetch_aggregate(items_type, ITEM_IDS, full=False, limit=2, offset=3))

    assert isinstance(result, ListOnlyResult)
    assert result.count == len(ITEM_IDS)
    assert result.items[0].url == f"/v1/items/{ITEM_IDS[0]}"
    assert upstream.calls == []


def test_full_page_keeps_listing_order(source, items_type):
    aggregator = AggregateService(source, concurrency=2)
    ids = sorted(ITEM_IDS, key=collation_key)
    result = asyncio.run(aggregator.fetch_aggregate(items_type, ids, full=True, limit=5, offset=2))

    assert isinstance(result, AggregateResult)
    assert [item["id"] for item in result.items] == ids[2:7]
    assert (result.total, result.count, result.limit, result.offset) == (len(ids), 5, 5, 2)
    assert result.next == "/v1/items?full=true&offset=7&limit=5"
    assert result.prev == "/v1/items?full=true&offset=0&limit=5"


class SlowFirstSource:
    """DataSource whose earlier ids take longer, so fetches finish in reverse."""

    def __init__(self, ids):
        self.delays = {f"items/{item_id}.json": 0.02 * (len(ids) - i) for i, item_id in enumerate(ids)}
        self.finished = []

    def raw_url(self, path):
        return f"{RAW_BASE}/{path}"

    def listing_url(self, dir_path):
        return f"{API_BASE}/{dir_path}"

    async def fetch_raw(self, path):
        await asyncio.sleep(self.delays[path])
        self.finished.append(path)
        return json.dumps({"path": path}).encode()

    async def list_directory(self, dir_path):
        raise AssertionError("not used")


def test_full_page_order_ignores_completion_order(items_type):
    ids = ITEM_IDS[:6]
    slow = SlowFirstSource(ids)
    result = asyncio.run(AggregateService(slow).fetch_page(items_type, ids))

    expected = [f"items/{item_id}.json" for item_id in ids]
    assert slow.finished == list(reversed(expected))
    assert [item["path"] for item in result.items] == expected


def test_full_page_past_the_end(source, upstream, items_type):
    result = asyncio.run(AggregateService(source).fetch_page(items_type, ITEM_IDS, limit=5, offset=50))
    assert result.items == []
    assert result.total == len(ITEM_IDS)
    assert result.next is None
    assert result.prev == "/v1/items?full=true&offset=45&limit=5"
    assert upstream.calls == []


def test_full_page_drops_failures_and_bad_json(source, upstream, items_type):
    upstream.failures["items/anvil.json"] = 404
    upstream.files["items/battery.json"] = b"{not json"

    result = asyncio.run(AggregateService(source).fetch_page(items_type, ITEM_IDS[:4]))
    assert [item["id"] for item in result.items] == ["adrenaline_shot", "arc-alloy"]
    assert result.count == 2
    assert result.limit == HARD_CEILING


# Proxy service


def test_proxy_store_is_skipped_for_hits(source, cache_store, registry):
    proxy = ProxyService.create(cache=cache_store, source=source, ttl=60, stale_while_revalidate=0)

    fresh = asyncio.run(proxy.single_file(registry.resolve("maps")))
    assert not fresh.cached
    assert fresh.response.headers["Cache-Control"] == "public, max-age=60"

    asyncio.run(proxy.store(fresh))
    assert cache_store.ttls == {fresh.key: 60}

    hit = asyncio.run(proxy.single_file(registry.resolve("maps")))
    assert hit.cached
    assert hit.response == fresh.response


def test_proxy_maps_upstream_errors(source, upstream, cache_store, registry):
    proxy = ProxyService.create(cache=cache_store, source=source)
    del upstream.files["projects.json"]
    upstream.failures["hideout"] = 500

    with pytest.raises(DataNotFound):
        asyncio.run(proxy.single_file(registry.resolve("projects")))
    with pytest.raises(ItemNotFound):
        asyncio.run(proxy.item(registry.resolve("quests"), "missing"))
    with pytest.raises(UpstreamFailure) as excinfo:
        asyncio.run(proxy.collection(registry.resolve("hideout")))
    assert excinfo.value.message == "Failed to list hideout"


# Errors and headers


def test_error_messages():
    assert UnknownType("x").message == "Unknown data type: x"
    assert UnknownType("x", collection=True).message == "Unknown collection type: x"
    assert ItemNotFound("items", "ghost").message == "item not found: ghost"
    assert DataNotFound("bots").message == "Data not found: bots"
    assert UpstreamFailure().message == "Failed to fetch data"
    assert UpstreamFailure(listing="items").status_code == 502
    assert InternalFault().message == "Internal Server Error"


def test_cache_control():
    assert cache_control(300) == "public, max-age=300"
    assert cache_control(300, 3600) == "public, max-age=300, stale-while-revalidate=3600"


def test_settings_validation():
    with pytest.raises(ValueError):
        Settings(max_full_items=HARD_CEILING + 1)
    with pytest.raises(ValueError):
        Settings(cache_ttl=0)
