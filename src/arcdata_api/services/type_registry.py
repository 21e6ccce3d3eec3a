"""Static registry of the dataset types exposed by the API."""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from arcdata_api.entities import RouteKind, RouteType

# Root-level JSON files
SINGLE_FILE_TYPES = {
    "bots": "bots.json",
    "maps": "maps.json",
    "projects": "projects.json",
    "skillNodes": "skillNodes.json",
    "trades": "trades.json",
}

# Directories holding one JSON file per item
COLLECTION_TYPES = {
    "items": "items",
    "hideout": "hideout",
    "quests": "quests",
    "map-events": "map-events",
}

ALIASES = {
    "skill-nodes": "skillNodes",
}


class TypeRegistry:
    """Read-only mapping of type names (and aliases) to route types.

    Lookup is an exact, case-sensitive match. An alias is only a second
    name for a canonical type, so both resolve to the same RouteType
    instance.

    Example:
        ```python
        registry = TypeRegistry.default()
        registry.resolve("skill-nodes") is registry.resolve("skillNodes")  # True
        registry.resolve("Bots")  # None
        ```
    """

    def __init__(self, types: Iterable[RouteType], aliases: Mapping[str, str] | None = None) -> None:
        canonical = {route_type.name: route_type for route_type in types}
        aliases = dict(aliases or {})

        for alias, target in aliases.items():
            if target not in canonical:
                raise ValueError(f"Alias {alias!r} points at unknown type {target!r}")
            if alias in canonical:
                raise ValueError(f"Alias {alias!r} shadows a canonical type")

        self._types = MappingProxyType(canonical)
        self._aliases = MappingProxyType(aliases)

    @classmethod
    def default(cls) -> "TypeRegistry":
        """Registry of the ArcRaiders dataset types."""
        types = [RouteType(name, RouteKind.SINGLE_FILE, f) for name, f in SINGLE_FILE_TYPES.items()]
        types += [RouteType(name, RouteKind.COLLECTION, d) for name, d in COLLECTION_TYPES.items()]
        return cls(types, ALIASES)

    def resolve(self, name: str) -> RouteType | None:
        """Resolve a canonical name or alias.

        Args:
            name: Type name as it appears in the path

        Returns:
            The RouteType, or None if the name is unknown
        """
        return self._types.get(self._aliases.get(name, name))

    def resolve_collection(self, name: str) -> RouteType | None:
        """Resolve a name, accepting only collection types."""
        route_type = self.resolve(name)
        if route_type is None or not route_type.is_collection:
            return None
        return route_type

    @property
    def types(self) -> Mapping[str, RouteType]:
        """Canonical types by name."""
        return self._types

    @property
    def aliases(self) -> Mapping[str, str]:
        """Alias to canonical name."""
        return self._aliases
