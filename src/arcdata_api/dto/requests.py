"""Request DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


def _to_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


class CollectionQuery(BaseModel):
    """Query string accepted by ``/v1/{collection}``.

    Values that cannot be parsed fall back to their defaults instead of
    failing the request.
    """

    full: bool = Field(False, description="Return complete item payloads instead of id/url stubs")
    limit: int | None = Field(None, description="Items per page in full mode (capped server-side)")
    offset: int = Field(0, description="Number of leading items to skip in full mode")

    @field_validator("full", mode="before")
    @classmethod
    def _parse_full(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in ("true", "1", "yes")

    @field_validator("limit", mode="before")
    @classmethod
    def _parse_limit(cls, value: Any) -> int | None:
        parsed = _to_int(value)
        return parsed if parsed is not None and parsed > 0 else None

    @field_validator("offset", mode="before")
    @classmethod
    def _parse_offset(cls, value: Any) -> int:
        parsed = _to_int(value)
        return parsed if parsed is not None and parsed >= 0 else 0

    @classmethod
    def from_query(cls, query: dict[str, str]) -> "CollectionQuery":
        """Build from a raw query mapping, ignoring unrelated keys."""
        return cls.model_validate({k: v for k, v in query.items() if k in cls.model_fields})
