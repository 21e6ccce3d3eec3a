"""FastAPI application.

All paths go through one catch-all route into DataHandler, which owns
routing, errors and headers. FastAPI's own docs routes are disabled so
they cannot shadow the data paths.
"""

from fastapi import FastAPI, Request, Response

from arcdata_api.api.dependencies import HandlerDep, lifespan
from arcdata_api.config import settings
from arcdata_api.handlers.data_handler import API_NAME, API_VERSION
from arcdata_api.protocols import CacheStore, DataSource

# Every method reaches DataHandler, which rejects all but reads and preflights
ALL_METHODS = ["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"]


def create_app(
    cache_store: CacheStore | None = None,
    data_source: DataSource | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        cache_store: Cache backend to use instead of Redis.
        data_source: Upstream to use instead of GitHub.

    Returns:
        A FastAPI app whose lifespan wires the remaining layers
    """
    app = FastAPI(
        title=API_NAME,
        description="Read-only, cached proxy for the ArcRaiders game dataset",
        version=API_VERSION,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    if cache_store is not None:
        app.state.cache_store = cache_store
    if data_source is not None:
        app.state.data_source = data_source

    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def proxy(request: Request, handler: HandlerDep) -> Response:
        """Every path, every supported method."""
        return await handler.handle(request)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "arcdata_api.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
