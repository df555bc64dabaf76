"""HTTP header helpers for the serving boundary."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Literal

import httpx

from livery.duration import parse_seconds
from livery.types import Duration

THEME_HEADER = "x-livery-theme"

CacheScope = Literal["public", "private"]


def get_cache_headers(
    *,
    max_age: Duration = 300,
    stale_while_revalidate: Duration = 3600,
    scope: CacheScope = "public",
    vary: Sequence[str] = (THEME_HEADER,),
) -> httpx.Headers:
    """Build ``Cache-Control`` and ``Vary`` headers for themed responses.

    Ages are seconds, or duration strings such as "5m".

    Usage:
        headers = get_cache_headers(max_age="1m")
        headers["cache-control"]  # "public, max-age=60, stale-while-revalidate=3600"
    """
    if scope not in ("public", "private"):
        raise ValueError(f"Invalid cache scope: {scope!r}")

    headers = httpx.Headers()
    directives = [
        scope,
        f"max-age={parse_seconds(max_age)}",
        f"stale-while-revalidate={parse_seconds(stale_while_revalidate)}",
    ]
    headers["Cache-Control"] = ", ".join(directives)
    if vary:
        headers["Vary"] = ", ".join(vary)
    return headers


def get_theme_from_headers(
    headers: httpx.Headers | Mapping[str, str], header_name: str = THEME_HEADER
) -> str | None:
    """Theme id forwarded by the request-boundary layer, if any."""
    value = httpx.Headers(headers).get(header_name)
    if value is None or not value.strip():
        return None
    return value.strip()
