"""Error taxonomy.

Two families live here:

- ``UpstreamError`` subclasses classify the outcome of a single outbound
  call. They never reach the client directly.
- ``ApiError`` subclasses are the client-facing contract. Each carries the
  structured fields it was raised with and exposes ``status_code`` and
  ``message``; ``arcdata_api.responses.error_response`` is the only place that
  turns them into an HTTP response.
"""


class UpstreamError(Exception):
    """Base class for a failed outbound read."""

    def __init__(self, url: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"{url} -> {status_code if status_code is not None else 'transport error'}")


class UpstreamNotFound(UpstreamError):
    """Upstream answered 404."""


class UpstreamUnavailable(UpstreamError):
    """Non-404 failure status, transport failure, or malformed payload."""


class ApiError(Exception):
    """Base class for errors rendered as ``{"error": message}``."""

    status_code: int = 500

    @property
    def message(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.message


class UnknownType(ApiError):
    """Requested type is absent from the registry."""

    status_code = 404

    def __init__(self, type_name: str, collection: bool = False) -> None:
        self.type_name = type_name
        self.collection = collection
        super().__init__(type_name)

    @property
    def message(self) -> str:
        kind = "collection" if self.collection else "data"
        return f"Unknown {kind} type: {self.type_name}"


class ItemNotFound(ApiError):
    """Upstream has no file for this collection item."""

    status_code = 404

    def __init__(self, type_name: str, item_id: str) -> None:
        self.type_name = type_name
        self.item_id = item_id
        super().__init__(type_name, item_id)

    @property
    def message(self) -> str:
        # "items" -> "item", "map-events" -> "map-event"
        singular = self.type_name[:-1] if self.type_name.endswith("s") else self.type_name
        return f"{singular} not found: {self.item_id}"


class DataNotFound(ApiError):
    """Upstream has no file for a single-file type."""

    status_code = 404

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(type_name)

    @property
    def message(self) -> str:
        return f"Data not found: {self.type_name}"


class UpstreamFailure(ApiError):
    """Upstream could not be read. ``listing`` names the collection being listed."""

    status_code = 502

    def __init__(self, listing: str | None = None) -> None:
        self.listing = listing
        super().__init__(listing)

    @property
    def message(self) -> str:
        if self.listing is not None:
            return f"Failed to list {self.listing}"
        return "Failed to fetch data"


class MethodNotAllowed(ApiError):
    """Anything but a read or a preflight."""

    status_code = 405

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(method)

    @property
    def message(self) -> str:
        return f"Method not allowed: {self.method}"


class RouteNotFound(ApiError):
    """Path matches no known route."""

    status_code = 404

    @property
    def message(self) -> str:
        return "Not Found"


class InternalFault(ApiError):
    """Anything unexpected. The cause is logged, never echoed."""

    status_code = 500

    @property
    def message(self) -> str:
        return "Internal Server Error"
