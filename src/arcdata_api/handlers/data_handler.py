"""HTTP handler for the data API.

Executes router actions against the proxy service and converts the
outcome into responses. Client errors come back as their ApiError
envelope; anything unexpected is logged and answered with a generic 500.
"""

import logging

from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from starlette.background import BackgroundTask

from arcdata_api.config import Settings, settings as default_settings
from arcdata_api.dto import ApiInfoResponse
from arcdata_api.errors import ApiError, InternalFault
from arcdata_api.handlers.router import (
    Action,
    ApiInfo,
    FetchItem,
    FetchSingleFile,
    ListCollection,
    Preflight,
    RouteError,
    Router,
)
from arcdata_api.responses import envelope_headers, error_response, preflight_response, wrap
from arcdata_api.services import ProxyResult, ProxyService

logger = logging.getLogger(__name__)

API_NAME = "ArcRaiders Data API"
API_VERSION = "1.0.0"

ENDPOINTS = {
    # Single-file endpoints
    "bots": "/v1/bots",
    "maps": "/v1/maps",
    "projects": "/v1/projects",
    "skillNodes": "/v1/skill-nodes",
    "trades": "/v1/trades",
    # Collection endpoints
    "items": "/v1/items",
    "item": "/v1/items/{item_id}",
    "hideout": "/v1/hideout",
    "hideoutModule": "/v1/hideout/{module_id}",
    "quests": "/v1/quests",
    "quest": "/v1/quests/{quest_id}",
    "mapEvents": "/v1/map-events",
    "mapEvent": "/v1/map-events/{event_id}",
}


class DataHandler:
    """HTTP handler for every data route.

    This handler delegates routing to Router and data access to
    ProxyService, and handles HTTP-specific concerns like:
    - HTTPS enforcement
    - Converting results and errors to responses
    - Scheduling cache population after the response is sent
    """

    def __init__(self, router: Router, proxy: ProxyService, settings: Settings | None = None) -> None:
        """Initialize the data handler.

        Args:
            router: Request router (required).
            proxy: Proxy service for data routes (required).
            settings: Application settings. Defaults to the global settings.
        """
        self._router = router
        self._proxy = proxy
        self._settings = settings or default_settings

    async def handle(self, request: Request) -> Response:
        """Answer a request to any path.

        Args:
            request: The inbound request

        Returns:
            The response, never raising
        """
        if self._settings.enforce_https and self._is_plain_http(request):
            return RedirectResponse(
                str(request.url.replace(scheme="https")),
                status_code=301,
                headers=envelope_headers(),
            )

        try:
            action = self._router.route(request.method, request.url.path, dict(request.query_params))
            if isinstance(action, Preflight):
                return preflight_response()
            return await self.execute(action)
        except ApiError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unhandled error for %s %s", request.method, request.url.path)
            return error_response(InternalFault())

    async def execute(self, action: Action) -> Response:
        """Run a routed action.

        Raises:
            ApiError: For any client-facing failure
        """
        if isinstance(action, RouteError):
            raise action.error

        if isinstance(action, ApiInfo):
            return wrap(self.api_info().model_dump())

        if isinstance(action, FetchSingleFile):
            result = await self._proxy.single_file(action.route_type)
        elif isinstance(action, FetchItem):
            result = await self._proxy.item(action.route_type, action.item_id)
        elif isinstance(action, ListCollection):
            result = await self._proxy.collection(
                action.route_type,
                full=action.full,
                limit=action.limit,
                offset=action.offset,
            )
        else:
            raise TypeError(f"Unsupported action: {action!r}")

        return self._respond(result)

    def api_info(self) -> ApiInfoResponse:
        """Service description served at ``/`` and ``/v1``."""
        return ApiInfoResponse(
            name=API_NAME,
            version=API_VERSION,
            endpoints=ENDPOINTS,
            source=self._settings.data_source_url,
        )

    def _respond(self, result: ProxyResult) -> Response:
        response = wrap(result.response)
        if not result.cached:
            # Runs after the body is sent; ProxyService.store never raises
            response.background = BackgroundTask(self._proxy.store, result)
        return response

    @staticmethod
    def _is_plain_http(request: Request) -> bool:
        forwarded = request.headers.get("x-forwarded-proto")
        scheme = forwarded.split(",")[0].strip() if forwarded else request.url.scheme
        return scheme == "http"
