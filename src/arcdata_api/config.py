import os
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()

# Edge platforms cap outbound sub-requests at 50 per inbound request;
# the directory listing uses one of them.
HARD_CEILING = 45


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Cache
    cache_ttl: int = int(os.getenv("CACHE_TTL", "300"))  # 5 minutes
    stale_while_revalidate: int = int(os.getenv("STALE_WHILE_REVALIDATE", "3600"))
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "arcdata")

    # Upstream
    github_raw_base: str = os.getenv(
        "GITHUB_RAW_BASE",
        "https://raw.githubusercontent.com/RaidTheory/arcraiders-data/main",
    )
    github_api_base: str = os.getenv(
        "GITHUB_API_BASE",
        "https://api.github.com/repos/RaidTheory/arcraiders-data/contents",
    )
    data_source_url: str = os.getenv("DATA_SOURCE_URL", "https://github.com/RaidTheory/arcraiders-data")
    github_token: str | None = os.getenv("GITHUB_TOKEN")
    upstream_user_agent: str = os.getenv("UPSTREAM_USER_AGENT", "ArcRaiders-API/1.0")
    upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "30"))

    # Aggregate ("full") responses
    max_full_items: int = int(os.getenv("MAX_FULL_ITEMS", str(HARD_CEILING)))
    fetch_concurrency: int = int(os.getenv("FETCH_CONCURRENCY", str(HARD_CEILING)))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"
    enforce_https: bool = os.getenv("ENFORCE_HTTPS", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_ttl <= 0:
            raise ValueError("CACHE_TTL must be a positive number of seconds")

        if self.stale_while_revalidate < 0:
            raise ValueError("STALE_WHILE_REVALIDATE must not be negative")

        if not 1 <= self.max_full_items <= HARD_CEILING:
            raise ValueError(
                f"MAX_FULL_ITEMS must be between 1 and {HARD_CEILING}, got {self.max_full_items}"
            )

        if self.fetch_concurrency < 1:
            raise ValueError("FETCH_CONCURRENCY must be at least 1")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create an asyncio Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
    )
