"""Core types for livery."""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Literal, Union

TokenType = Literal[
    "string",
    "color",
    "dimension",
    "fontFamily",
    "number",
    "boolean",
    "fontWeight",
    "shadow",
    "url",
]

TOKEN_TYPES: frozenset[str] = frozenset(
    (
        "string",
        "color",
        "dimension",
        "fontFamily",
        "number",
        "boolean",
        "fontWeight",
        "shadow",
        "url",
    )
)

# Leaf values a theme can hold
TokenValue = Union[str, int, float, bool]

# A resolved theme: nested dicts mirroring the schema, leaves are TokenValues
Theme = dict[str, Any]

ValidationMode = Literal["strict", "coerce"]

# Fetcher supplied by the caller: theme id -> (possibly partial) payload
Fetcher = Callable[[str], Union[Mapping[str, Any], Awaitable[Mapping[str, Any]]]]

# Duration type alias
Duration = Union[str, int, timedelta]  # "30s", "5m", "2h", "1d", ms or timedelta


class CacheState(Enum):
    """Freshness of a cache entry."""

    FRESH = "fresh"
    STALE = "stale"
    REVALIDATING = "revalidating"


class ResolveStatus(Enum):
    """Externally observable resolver state for one theme id."""

    NO_ENTRY = "no_entry"
    FETCHING = "fetching"
    READY = "ready"
    STALE = "stale"
    REVALIDATING = "revalidating"


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A resolved theme with cache metadata."""

    key: str
    value: Theme
    fetched_at: int  # Unix timestamp ms
    ttl: int  # ms

    @property
    def expires_at(self) -> int:
        return self.fetched_at + self.ttl

    def is_stale(self, now: int) -> bool:
        """Stale once more than ttl has elapsed since the fetch."""
        return now - self.fetched_at > self.ttl

    def state(self, now: int, *, revalidating: bool = False) -> CacheState:
        if not self.is_stale(now):
            return CacheState.FRESH
        if revalidating:
            return CacheState.REVALIDATING
        return CacheState.STALE
