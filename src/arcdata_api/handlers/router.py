"""Path routing for the data API.

The router turns method, path and query into an action value. It does no
I/O, so every routing rule can be tested without a server.

Path grammar:
    /, /v1, /v1/               -> ApiInfo
    /v1/{type}                 -> FetchSingleFile or ListCollection
    /v1/{type}/{id}            -> FetchItem (collections only)
    anything else              -> RouteError(RouteNotFound)

OPTIONS on any path is a Preflight, decided before the path is looked at.
GET and HEAD are reads; any other method is a RouteError(MethodNotAllowed).
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Union

from arcdata_api.dto import CollectionQuery
from arcdata_api.entities import RouteType
from arcdata_api.errors import ApiError, MethodNotAllowed, RouteNotFound, UnknownType
from arcdata_api.services import TypeRegistry

READ_METHODS = frozenset({"GET", "HEAD"})
INFO_PATHS = frozenset({"/", "/v1", "/v1/"})
TYPE_PATH = re.compile(r"^/v1/([a-z-]+)/?$")
ITEM_PATH = re.compile(r"^/v1/([a-z-]+)/([a-z0-9_-]+)/?$")


@dataclass(frozen=True)
class Preflight:
    pass


@dataclass(frozen=True)
class ApiInfo:
    pass


@dataclass(frozen=True)
class FetchSingleFile:
    route_type: RouteType


@dataclass(frozen=True)
class ListCollection:
    route_type: RouteType
    full: bool = False
    limit: int | None = None
    offset: int = 0


@dataclass(frozen=True)
class FetchItem:
    route_type: RouteType
    item_id: str


@dataclass(frozen=True)
class RouteError:
    error: ApiError


Action = Union[Preflight, ApiInfo, FetchSingleFile, ListCollection, FetchItem, RouteError]


class Router:
    """Maps requests to actions using an injected type registry.

    Example:
        ```python
        router = Router(TypeRegistry.default())
        router.route("GET", "/v1/items", {"full": "true", "limit": "10"})
        # ListCollection(route_type=RouteType(name="items", ...), full=True, limit=10, offset=0)
        ```
    """

    def __init__(self, registry: TypeRegistry) -> None:
        self._registry = registry

    def route(self, method: str, path: str, query: Mapping[str, str] | None = None) -> Action:
        """Decide what a request asks for.

        Args:
            method: HTTP method
            path: URL path, without query string
            query: Decoded query parameters

        Returns:
            One of the action dataclasses in this module
        """
        method = method.upper()
        if method == "OPTIONS":
            return Preflight()
        if method not in READ_METHODS:
            return RouteError(MethodNotAllowed(method))

        if path in INFO_PATHS:
            return ApiInfo()

        match = TYPE_PATH.match(path)
        if match:
            name = match.group(1)
            route_type = self._registry.resolve(name)
            if route_type is None:
                return RouteError(UnknownType(name))
            if not route_type.is_collection:
                return FetchSingleFile(route_type)

            params = CollectionQuery.from_query(dict(query or {}))
            return ListCollection(route_type, full=params.full, limit=params.limit, offset=params.offset)

        match = ITEM_PATH.match(path)
        if match:
            name, item_id = match.groups()
            route_type = self._registry.resolve_collection(name)
            if route_type is None:
                return RouteError(UnknownType(name, collection=True))
            return FetchItem(route_type, item_id)

        return RouteError(RouteNotFound())

    @property
    def registry(self) -> TypeRegistry:
        return self._registry
