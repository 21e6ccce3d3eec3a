"""Upstream data source protocol.

Defines the interface for the read-only provider of the dataset: raw JSON
files plus a directory listing.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class DataSource(Protocol):
    """Protocol for upstream data providers."""

    def raw_url(self, path: str) -> str:
        """Absolute URL of a raw file (used as its cache key)."""
        ...

    def listing_url(self, dir_path: str) -> str:
        """Absolute URL of a directory listing (used as its cache key)."""
        ...

    async def fetch_raw(self, path: str) -> bytes:
        """Fetch a raw file body, unparsed.

        Raises:
            UpstreamNotFound: Upstream answered 404
            UpstreamUnavailable: Any other failure
        """
        ...

    async def list_directory(self, dir_path: str) -> list[str]:
        """List item identifiers in a directory, in canonical sorted order.

        Raises:
            UpstreamError: Listing could not be fetched or parsed
        """
        ...
