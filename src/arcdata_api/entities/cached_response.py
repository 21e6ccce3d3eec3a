"""Cached response domain entity."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CachedResponse:
    """The representation handed to (and read back from) the cache store.

    Headers are stored alongside the body so a cache hit reproduces the
    original content type and cache-control directive exactly.

    Attributes:
        body: Raw response body
        headers: Response headers to replay
        status: HTTP status code
    """

    body: bytes
    headers: dict[str, str] = field(default_factory=dict)
    status: int = 200
