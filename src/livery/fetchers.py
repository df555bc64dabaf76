"""HTTP fetcher built on httpx.

The resolver never performs transport itself; this is a ready-made
fetcher for themes served as JSON over HTTP.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, cast
from urllib.parse import quote

import httpx


def create_http_fetcher(
    url_template: str,
    *,
    client: httpx.AsyncClient | None = None,
    headers: Mapping[str, str] | None = None,
    timeout: float = 10.0,
) -> Callable[[str], Awaitable[Mapping[str, Any]]]:
    """Create a fetcher that GETs one JSON theme payload per theme id.

    Args:
        url_template: URL with a ``{theme_id}`` placeholder, e.g.
            ``"https://api.example.com/themes/{theme_id}"``
        client: Shared client to use; a short-lived client is opened per
            request when omitted
        headers: Extra request headers, e.g. authorization
        timeout: Request timeout in seconds when no client is given

    Returns:
        Async fetcher suitable for ``create_resolver``
    """
    if "{theme_id}" not in url_template:
        raise ValueError("url_template must contain a {theme_id} placeholder")

    request_headers = {"Accept": "application/json", **(headers or {})}

    async def fetch(theme_id: str) -> Mapping[str, Any]:
        url = url_template.format(theme_id=quote(theme_id, safe=""))
        if client is not None:
            response = await client.get(url, headers=request_headers)
        else:
            async with httpx.AsyncClient(timeout=timeout) as session:
                response = await session.get(url, headers=request_headers)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, Mapping):
            raise TypeError(
                f"Expected a JSON object for theme {theme_id!r}, "
                f"got {type(payload).__name__}"
            )
        return cast(Mapping[str, Any], payload)

    return fetch
