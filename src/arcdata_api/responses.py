"""Client-facing response envelope.

Every response leaves through one of the builders here, so the CORS and
security headers are applied uniformly. Constructed bodies are JSON;
pass-through bodies keep upstream bytes and only get new headers.
"""

import json
from typing import Any

from fastapi import Response

from arcdata_api.dto import ErrorResponse
from arcdata_api.entities import CachedResponse
from arcdata_api.errors import ApiError

JSON_CONTENT_TYPE = "application/json"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

PREFLIGHT_MAX_AGE = 86400


def render_json(data: Any) -> bytes:
    """Serialize a constructed body (2-space indent, like upstream files)."""
    return json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")


def cache_control(max_age: int, stale_while_revalidate: int = 0) -> str:
    """Cache-Control value for a cacheable success.

    Args:
        max_age: Freshness window in seconds
        stale_while_revalidate: Extra window in which stale content may be
            served while a refresh happens; 0 disables the extension
    """
    directive = f"public, max-age={max_age}"
    if stale_while_revalidate > 0:
        directive += f", stale-while-revalidate={stale_while_revalidate}"
    return directive


def cacheable(body: bytes, max_age: int, stale_while_revalidate: int = 0) -> CachedResponse:
    """Stored representation of a successful JSON response."""
    return CachedResponse(
        body=body,
        headers={
            "Content-Type": JSON_CONTENT_TYPE,
            "Cache-Control": cache_control(max_age, stale_while_revalidate),
        },
        status=200,
    )


def envelope_headers(headers: dict[str, str] | None = None) -> dict[str, str]:
    """Layer the CORS and security bundle over the given headers."""
    return {**(headers or {}), **CORS_HEADERS, **SECURITY_HEADERS}


def wrap(payload: CachedResponse | Any, status: int = 200) -> Response:
    """Build the HTTP response for a stored response or a JSON-able payload."""
    if isinstance(payload, CachedResponse):
        return Response(
            content=payload.body,
            status_code=payload.status,
            headers=envelope_headers(payload.headers),
        )

    return Response(
        content=render_json(payload),
        status_code=status,
        headers=envelope_headers({"Content-Type": JSON_CONTENT_TYPE}),
    )


def error_response(error: ApiError) -> Response:
    """Render any ApiError as ``{"error": message}`` with its status."""
    return wrap(ErrorResponse(error=error.message).model_dump(), status=error.status_code)


def preflight_response() -> Response:
    """Empty-bodied answer to a CORS preflight."""
    headers = envelope_headers({"Access-Control-Max-Age": str(PREFLIGHT_MAX_AGE)})
    return Response(status_code=204, headers=headers)
