"""Cache storage protocol.

Defines the interface for the byte cache sitting in front of the upstream.
The store is opaque to the service layer: get and put by key, with TTL
enforcement left to the backend.

Implementations can include:
- Redis (default)
- An in-process dictionary (tests)
- Any other key-value store with expiry
"""

from typing import Protocol, runtime_checkable

from arcdata_api.entities import CachedResponse


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed. Implementations must be safe for
    concurrent get/put; writes for a key are idempotent.
    """

    async def get(self, key: str) -> CachedResponse | None:
        """Look up a stored response.

        Args:
            key: Cache key from ``services.cache_keys.key_for``

        Returns:
            The stored response, or None on a miss
        """
        ...

    async def put(self, key: str, response: CachedResponse, ttl: int) -> None:
        """Store a response.

        Args:
            key: Cache key from ``services.cache_keys.key_for``
            response: Status, headers and body to replay on a hit
            ttl: Time-to-live in seconds
        """
        ...

    async def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...
