"""Repository layer for data access.

This layer abstracts external dependencies (Redis, the GitHub-hosted
dataset) behind protocol-based interfaces. This enables:
- Easy swapping of implementations
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from arcdata_api.protocols import CacheStore, DataSource

from .github_repository import GitHubRepository
from .redis_repository import RedisCacheRepository

__all__ = [
    "CacheStore",
    "DataSource",
    "GitHubRepository",
    "RedisCacheRepository",
]
