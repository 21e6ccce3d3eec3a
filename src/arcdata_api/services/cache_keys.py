"""Cache key derivation.

Single files and items are keyed by their upstream URL alone, so an alias
and its canonical name share one entry. Collection listings are keyed by
the listing URL; full pages get a suffix naming the page so list-only and
full payloads, and different pages, never collide.
"""


def full_variant(offset: int, limit: int) -> str:
    """Discriminator for a page of full item payloads.

    Args:
        offset: Requested offset
        limit: Effective page size (after capping)
    """
    return f"full=true&offset={offset}&limit={limit}"


def key_for(upstream_url: str, variant: str | None = None) -> str:
    """Deterministic cache key for an upstream resource and response shape.

    Args:
        upstream_url: Absolute URL the response is built from
        variant: Response-shape discriminator, None for the plain shape

    Returns:
        The cache key
    """
    if not variant:
        return upstream_url
    return f"{upstream_url}?{variant}"
