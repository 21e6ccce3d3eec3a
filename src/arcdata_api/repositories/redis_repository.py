"""Redis implementation of CacheStore.

Each entry is a hash under ``{prefix}:{key}`` holding the status, the
JSON-encoded headers and the raw body, with a Redis-side expiry.
"""

import json

import redis.asyncio as redis

from arcdata_api.config import get_redis_client, settings
from arcdata_api.entities import CachedResponse


class RedisCacheRepository:
    """Redis implementation of the CacheStore protocol.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ) -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
            prefix: Namespace prepended to every key. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = prefix or settings.cache_key_prefix

    @classmethod
    def create(cls, prefix: str | None = None) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository with defaults.

        Args:
            prefix: Key namespace. If None, uses settings.

        Returns:
            Configured RedisCacheRepository
        """
        return cls(prefix=prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    async def get(self, key: str) -> CachedResponse | None:
        """Look up a stored response.

        Args:
            key: Cache key

        Returns:
            The stored response, or None on a miss
        """
        data = await self._client.hgetall(self._key(key))
        if not data or b"body" not in data:
            return None

        headers = json.loads(data.get(b"headers", b"{}"))
        return CachedResponse(
            body=data[b"body"],
            headers=headers,
            status=int(data.get(b"status", b"200")),
        )

    async def put(self, key: str, response: CachedResponse, ttl: int) -> None:
        """Store a response with an expiry.

        Args:
            key: Cache key
            response: Response to replay on a hit
            ttl: Time-to-live in seconds
        """
        redis_key = self._key(key)
        pipe = self._client.pipeline()
        pipe.hset(
            redis_key,
            mapping={
                "status": str(response.status),
                "headers": json.dumps(response.headers),
                "body": response.body,
            },
        )
        pipe.expire(redis_key, ttl)
        await pipe.execute()

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except redis.RedisError:
            return False

    async def close(self) -> None:
        """Close the Redis connection pool."""
        await self._client.aclose()
