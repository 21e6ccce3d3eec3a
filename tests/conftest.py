"""Shared fixtures: a fake GitHub upstream and an in-memory cache."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from arcdata_api.api.app import create_app
from arcdata_api.entities import CachedResponse
from arcdata_api.repositories import GitHubRepository

RAW_BASE = "https://raw.test/arcraiders-data/main"
API_BASE = "https://api.test/repos/arcraiders-data/contents"

ITEM_IDS = [
    "adrenaline_shot",
    "anvil",
    "arc-alloy",
    "battery",
    "blue_light_stick",
    "cable",
    "duct_tape",
    "ferro",
    "fuse",
    "hatch_key",
    "metal_parts",
    "rubber",
]


def _dump(data: object) -> bytes:
    return json.dumps(data, indent=2).encode()


class FakeGitHub:
    """Serves raw files and contents-API listings from a dict of paths.

    ``failures`` maps a file path or directory to the status it should
    fail with; ``calls`` records every requested URL.
    """

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.extra_entries: dict[str, list[dict]] = {}
        self.failures: dict[str, int] = {}
        self.calls: list[httpx.Request] = []

    def add(self, path: str, data: object) -> None:
        self.files[path] = _dump(data)

    def listing(self, dir_path: str) -> list[dict]:
        prefix = f"{dir_path}/"
        entries = [
            {"name": path[len(prefix) :], "path": path, "type": "file", "size": len(body)}
            for path, body in self.files.items()
            if path.startswith(prefix) and "/" not in path[len(prefix) :]
        ]
        return entries + self.extra_entries.get(dir_path, [])

    def count(self, fragment: str) -> int:
        return sum(1 for request in self.calls if fragment in str(request.url))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        url = str(request.url)

        if url.startswith(RAW_BASE + "/"):
            path = url[len(RAW_BASE) + 1 :]
            if path in self.failures:
                return httpx.Response(self.failures[path])
            if path in self.files:
                return httpx.Response(200, content=self.files[path])
            return httpx.Response(404, text="404: Not Found")

        if url.startswith(API_BASE + "/"):
            dir_path = url[len(API_BASE) + 1 :]
            if dir_path in self.failures:
                return httpx.Response(self.failures[dir_path], json={"message": "API rate limit exceeded"})
            return httpx.Response(200, json=self.listing(dir_path))

        return httpx.Response(404)


class InMemoryCacheStore:
    """CacheStore fake backed by a dict; TTLs are recorded, not enforced."""

    def __init__(self) -> None:
        self.entries: dict[str, CachedResponse] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key: str) -> CachedResponse | None:
        return self.entries.get(key)

    async def put(self, key: str, response: CachedResponse, ttl: int) -> None:
        self.entries[key] = response
        self.ttls[key] = ttl

    async def health_check(self) -> bool:
        return True


class BrokenCacheStore:
    """CacheStore whose backend is down."""

    async def get(self, key: str) -> CachedResponse | None:
        raise ConnectionError("cache unreachable")

    async def put(self, key: str, response: CachedResponse, ttl: int) -> None:
        raise ConnectionError("cache unreachable")

    async def health_check(self) -> bool:
        return False


@pytest.fixture
def upstream() -> FakeGitHub:
    """A fake upstream with every dataset type populated."""
    fake = FakeGitHub()
    fake.add("bots.json", [{"id": "wasp", "name": "Wasp"}, {"id": "hornet", "name": "Hornet"}])
    fake.add("maps.json", [{"id": "dam", "name": "Dam Battlegrounds"}])
    fake.add("projects.json", [{"id": "expedition", "phases": 5}])
    fake.add("skillNodes.json", [{"id": "conditioning_1", "tree": "conditioning"}])
    fake.add("trades.json", [{"trader": "celeste", "give": "ferro", "get": "anvil"}])

    for item_id in ITEM_IDS:
        fake.add(f"items/{item_id}.json", {"id": item_id, "name": {"en": item_id.replace("_", " ").title()}})
    fake.add("items/_index.json", {"generated": True})
    fake.extra_entries["items"] = [
        {"name": "README.md", "type": "file"},
        {"name": "icons", "type": "dir"},
    ]

    fake.add("hideout/workbench.json", {"id": "workbench", "maxLevel": 3})
    fake.add("hideout/scrappy.json", {"id": "scrappy", "maxLevel": 5})
    fake.add("quests/a_bad_feeling.json", {"id": "a_bad_feeling", "trader": "shani"})
    fake.add("map-events/night_raid.json", {"id": "night_raid", "map": "dam"})
    return fake


@pytest.fixture
def source(upstream: FakeGitHub) -> GitHubRepository:
    """GitHubRepository wired to the fake upstream."""
    return GitHubRepository(
        raw_base=RAW_BASE,
        api_base=API_BASE,
        user_agent="ArcRaiders-API/1.0",
        token="",
        client=httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler)),
    )


@pytest.fixture
def cache_store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def client(cache_store: InMemoryCacheStore, source: GitHubRepository):
    """Test client over the full app with fakes injected."""
    with TestClient(create_app(cache_store=cache_store, data_source=source)) as test_client:
        yield test_client
