"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class ApiInfoResponse(BaseModel):
    """Response DTO for ``/`` and ``/v1``."""

    name: str = Field(..., description="Service name")
    version: str = Field(..., description="API version")
    endpoints: dict[str, str] = Field(..., description="Endpoint name to path template")
    source: str = Field(..., description="Link to the upstream dataset")


class ListItem(BaseModel):
    """Single entry of a list-only response."""

    id: str = Field(..., description="Item identifier")
    url: str = Field(..., description="Relative path of the item endpoint")


class ListResponse(BaseModel):
    """Response DTO for ``/v1/{collection}`` without ``full``."""

    type: str = Field(..., description="Collection name")
    count: int = Field(..., description="Number of items", ge=0)
    items: list[ListItem] = Field(default_factory=list)


class AggregateData(BaseModel):
    """Page of full item payloads."""

    type: str = Field(..., description="Collection name")
    total: int = Field(..., description="Items available in the collection", ge=0)
    count: int = Field(..., description="Items returned in this page", ge=0)
    offset: int = Field(..., description="Requested offset", ge=0)
    limit: int = Field(..., description="Effective page size", ge=1)
    items: list[Any] = Field(default_factory=list, description="Upstream item payloads, unmodified")
    next: str | None = Field(None, description="Relative link to the next page")
    prev: str | None = Field(None, description="Relative link to the previous page")


class FullListResponse(BaseModel):
    """Response DTO for ``/v1/{collection}?full=true``."""

    data: AggregateData


class ErrorResponse(BaseModel):
    """Error envelope used for every failure."""

    error: str = Field(..., description="Human-readable error message")
