"""Collection listing domain entities."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ListEntry:
    """An item stub in a list-only response."""

    id: str
    url: str


@dataclass(frozen=True)
class ListOnlyResult:
    """Every item of a collection as id + link, straight from the listing."""

    type: str
    items: list[ListEntry] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class AggregateResult:
    """One page of full item payloads for a collection.

    Attributes:
        type: Canonical collection name
        total: Number of ids in the listing, before offset is applied
        offset: Requested offset
        limit: Effective per-call limit (never above the hard ceiling)
        items: Successfully fetched payloads, in listing order
        next: Relative link to the following page, if any
        prev: Relative link to the preceding page, if any
    """

    type: str
    total: int
    offset: int
    limit: int
    items: list[Any] = field(default_factory=list)
    next: str | None = None
    prev: str | None = None

    @property
    def count(self) -> int:
        return len(self.items)
