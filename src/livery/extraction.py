"""Theme id extraction at the request boundary.

Framework-agnostic strategies that read a theme id from an incoming request:
- subdomain: ``acme.yourapp.com`` -> ``acme``
- path: ``/t/acme/dashboard`` -> ``acme``, rewritten to ``/dashboard``
- header: ``X-Theme-ID: acme`` -> ``acme``
- query: ``?theme=acme`` -> ``acme``

Each strategy is a pure function over host, path, headers or URL. Requests
are described with ``httpx.Request`` so any server framework can adapt its
own request object in one line.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

import httpx

from livery.headers import get_theme_from_headers

Strategy = Literal["subdomain", "path", "header", "query", "custom"]

DEFAULT_IGNORED_SUBDOMAINS = ("www", "app", "api")


@dataclass(frozen=True, slots=True)
class ThemeExtraction:
    """Outcome of a strategy. ``theme_id`` is None when nothing was found."""

    theme_id: str | None = None
    rewrite_path: str | None = None


ThemeExtractor = Callable[[httpx.Request], ThemeExtraction]


# =============================================================================
# Strategies
# =============================================================================


def extract_from_subdomain(
    host: str,
    *,
    base_domain: str | None = None,
    ignore: Sequence[str] = DEFAULT_IGNORED_SUBDOMAINS,
) -> ThemeExtraction:
    """Use the left-most subdomain of ``host`` as the theme id.

    A host needs at least three labels to carry a subdomain. With
    ``base_domain``, only the labels in front of it are considered and hosts
    outside the base domain yield nothing.
    """
    hostname = host.strip().lower().partition(":")[0]
    labels = hostname.split(".")
    if len(labels) < 3:
        return ThemeExtraction()

    if base_domain is not None:
        base = base_domain.strip().lower()
        if not hostname.endswith("." + base):
            return ThemeExtraction()
        labels = labels[: len(labels) - len(base.split("."))]
        if not labels:
            return ThemeExtraction()

    subdomain = labels[0]
    if not subdomain or subdomain in ignore:
        return ThemeExtraction()
    return ThemeExtraction(theme_id=subdomain)


def extract_from_path(
    path: str, *, prefix: str = "/t/", rewrite: bool = True
) -> ThemeExtraction:
    """Take the segment after ``prefix`` as the theme id.

    With ``rewrite``, ``rewrite_path`` is the remaining path with the prefix
    and theme segment removed, e.g. ``/t/acme/settings`` -> ``/settings``.
    """
    if not prefix or not path.startswith(prefix):
        return ThemeExtraction()

    theme_id, _, rest = path[len(prefix) :].partition("/")
    if not theme_id:
        return ThemeExtraction()
    return ThemeExtraction(
        theme_id=theme_id, rewrite_path="/" + rest if rewrite else None
    )


def extract_from_header(
    headers: httpx.Headers | Mapping[str, str], name: str
) -> ThemeExtraction:
    return ThemeExtraction(theme_id=get_theme_from_headers(headers, name))


def extract_from_query(url: httpx.URL | str, name: str) -> ThemeExtraction:
    value = httpx.URL(url).params.get(name)
    if value is None or not value.strip():
        return ThemeExtraction()
    return ThemeExtraction(theme_id=value.strip())


# =============================================================================
# Extractor factory
# =============================================================================


def _host_of(request: httpx.Request) -> str:
    return request.headers.get("host") or request.url.host


def create_theme_extractor(
    strategy: Strategy,
    *,
    subdomain: Mapping[str, Any] | None = None,
    path: Mapping[str, Any] | None = None,
    header: Mapping[str, Any] | None = None,
    query: Mapping[str, Any] | None = None,
    get_theme: ThemeExtractor | None = None,
) -> ThemeExtractor:
    """Build an extractor for one strategy.

    Options are the keyword arguments of the matching ``extract_from_*``
    function. ``header`` and ``query`` need a ``name``; ``custom`` needs
    ``get_theme``.

    Usage:
        extract = create_theme_extractor("header", header={"name": "x-tenant"})
        extract(httpx.Request("GET", url, headers=incoming_headers)).theme_id

    Raises:
        ValueError: For an unknown strategy or missing required options.
    """
    if strategy == "subdomain":
        options = dict(subdomain or {})
        return lambda request: extract_from_subdomain(_host_of(request), **options)

    if strategy == "path":
        options = dict(path or {})
        return lambda request: extract_from_path(request.url.path, **options)

    if strategy == "header":
        if not header or "name" not in header:
            raise ValueError("Header options with a name are required")
        header_name = header["name"]
        return lambda request: extract_from_header(request.headers, header_name)

    if strategy == "query":
        if not query or "name" not in query:
            raise ValueError("Query options with a name are required")
        param = query["name"]
        return lambda request: extract_from_query(request.url, param)

    if strategy == "custom":
        if get_theme is None:
            raise ValueError("get_theme is required for the custom strategy")
        return get_theme

    raise ValueError(f"Unknown strategy: {strategy!r}")


__all__ = [
    "ThemeExtraction",
    "ThemeExtractor",
    "create_theme_extractor",
    "extract_from_header",
    "extract_from_path",
    "extract_from_query",
    "extract_from_subdomain",
]
