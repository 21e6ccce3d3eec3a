"""Route type domain entity."""

from dataclasses import dataclass
from enum import Enum


class RouteKind(str, Enum):
    """Where a type's data lives upstream."""

    SINGLE_FILE = "single-file"
    COLLECTION = "collection"


@dataclass(frozen=True)
class RouteType:
    """A dataset category exposed under ``/v1/{name}``.

    Attributes:
        name: Canonical type name (never an alias)
        kind: Single upstream file or a directory of per-item files
        location: Filename for single-file types, directory path for collections
    """

    name: str
    kind: RouteKind
    location: str

    @property
    def is_collection(self) -> bool:
        return self.kind is RouteKind.COLLECTION
