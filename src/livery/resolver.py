"""Theme resolver - fetch, validate, cache.

This module provides the resolver that turns a theme id into a complete,
validated Theme:
- resolve(): cached fetch with request coalescing and stale-while-revalidate
- get(): synchronous peek at the cached theme
- invalidate(), clear_cache(): drop cached themes
- revalidate(): explicitly await a refresh
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from contextvars import ContextVar
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from livery.cache import Clock, ResolverCache
from livery.duration import parse_duration
from livery.errors import FetchError, ValidationError
from livery.paths import get_at_path
from livery.schema import Schema
from livery.types import (
    CacheState,
    Duration,
    Fetcher,
    ResolveStatus,
    Theme,
    ValidationMode,
)
from livery.validation import merge

logger = logging.getLogger(__name__)

_VALIDATION_MODES = ("strict", "coerce")

# (resolver id, theme id) of every fetch on the current await chain. Tasks
# copy the context when created, so a fetch started from inside a fetcher
# inherits the chain of its parent.
_fetch_chain: ContextVar[tuple[tuple[int, str], ...]] = ContextVar(
    "livery_fetch_chain", default=()
)


@dataclass
class ThemeResolver:
    """Resolves theme ids to validated themes with caching.

    Each instance owns its cache and in-flight registry; two resolvers never
    share state.
    """

    _schema: Schema
    _fetcher: Fetcher
    _cache: ResolverCache
    _ttl: int
    _stale_while_revalidate: bool
    _validation_mode: ValidationMode
    _in_flight: dict[str, asyncio.Task[Theme]] = field(default_factory=dict)

    @property
    def schema(self) -> Schema:
        return self._schema

    async def resolve(self, theme_id: str) -> Theme:
        """Resolve a theme, fetching it only when needed.

        - Fresh cache entry: returned without suspending.
        - Stale entry with stale-while-revalidate: the stale theme is
          returned immediately and one background refresh is started.
        - Otherwise: joins the in-flight fetch for ``theme_id`` or starts
          one, so N concurrent calls cost a single fetcher invocation.

        Raises:
            FetchError: If the fetcher raised.
            ValidationError: If the fetched payload has mistyped values.
        """
        entry = self._cache.get(theme_id)

        if entry is not None:
            if not self._cache.is_stale(entry):
                return entry.value

            if self._stale_while_revalidate:
                if theme_id not in self._in_flight:
                    logger.debug("Serving stale theme %r, refreshing", theme_id)
                    self._start_fetch(theme_id)
                return entry.value

        return await self._join(theme_id)

    async def revalidate(self, theme_id: str) -> Theme:
        """Await a refresh of ``theme_id``, surfacing its failure.

        Joins the refresh already in flight (including a background one) or
        starts a new fetch.
        """
        return await self._join(theme_id)

    async def resolve_value(self, theme_id: str, path: str) -> Any:
        """Resolve a theme and read one dot path from it."""
        theme = await self.resolve(theme_id)
        value = get_at_path(theme, path)
        if value is None:
            raise KeyError(f"Unknown token path: {path!r}")
        return value

    def get(self, theme_id: str) -> Theme | None:
        """Cached theme for ``theme_id`` regardless of freshness. Never fetches."""
        entry = self._cache.get(theme_id)
        return entry.value if entry is not None else None

    def invalidate(self, theme_id: str) -> None:
        """Drop the cached theme. An in-flight fetch is not cancelled."""
        self._cache.invalidate(theme_id)

    def clear_cache(self) -> None:
        """Drop all cached themes. In-flight fetches still populate the cache."""
        self._cache.clear()

    def status(self, theme_id: str) -> ResolveStatus:
        pending = theme_id in self._in_flight
        state = self._cache.state(theme_id, revalidating=pending)
        if state is None:
            return ResolveStatus.FETCHING if pending else ResolveStatus.NO_ENTRY
        if state is CacheState.FRESH:
            return ResolveStatus.READY
        if state is CacheState.REVALIDATING:
            return ResolveStatus.REVALIDATING
        return ResolveStatus.STALE

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    async def _join(self, theme_id: str) -> Theme:
        self._check_cycle(theme_id)
        task = self._in_flight.get(theme_id)
        if task is None:
            task = self._start_fetch(theme_id)
        # Shielded: a cancelled caller must not cancel the shared fetch
        return await asyncio.shield(task)

    def _check_cycle(self, theme_id: str) -> None:
        chain = _fetch_chain.get()
        if (id(self), theme_id) not in chain:
            return
        steps = [key for owner, key in chain if owner == id(self)]
        cause = RuntimeError(
            "Cyclic theme resolution: " + " -> ".join([*steps, theme_id])
        )
        raise FetchError(theme_id, cause) from cause

    def _start_fetch(self, theme_id: str) -> asyncio.Task[Theme]:
        # Registered before the fetcher runs so concurrent callers join it
        task = asyncio.get_running_loop().create_task(self._fetch(theme_id))
        self._in_flight[theme_id] = task
        task.add_done_callback(partial(self._settle, theme_id))
        return task

    def _settle(self, theme_id: str, task: asyncio.Task[Theme]) -> None:
        if self._in_flight.get(theme_id) is task:
            del self._in_flight[theme_id]
        if task.cancelled():
            return
        # Retrieving the exception here keeps an unawaited background
        # refresh from being reported as "never retrieved"
        error = task.exception()
        if error is not None:
            logger.debug("Fetch of theme %r failed", theme_id, exc_info=error)

    async def _fetch(self, theme_id: str) -> Theme:
        logger.debug("Fetching theme %r", theme_id)
        token = _fetch_chain.set((*_fetch_chain.get(), (id(self), theme_id)))
        try:
            payload = self._fetcher(theme_id)
            if inspect.isawaitable(payload):
                payload = await payload
        except Exception as exc:
            raise FetchError(theme_id, exc) from exc
        finally:
            _fetch_chain.reset(token)

        try:
            theme = merge(self._schema, payload, mode=self._validation_mode)
        except ValidationError as exc:
            raise ValidationError(exc.issues, theme_id=theme_id) from None

        self._cache.put(theme_id, theme, self._ttl)
        return theme


def create_resolver(
    *,
    schema: Schema,
    fetcher: Fetcher,
    ttl: Duration = "5m",
    stale_while_revalidate: bool = True,
    max_size: int | None = 100,
    validation_mode: ValidationMode = "strict",
    clock: Clock | None = None,
) -> ThemeResolver:
    """Create a theme resolver.

    Args:
        schema: Schema every fetched payload is merged against
        fetcher: ``fetcher(theme_id)`` returning a partial theme mapping,
            or an awaitable of one
        ttl: Time a resolved theme stays fresh
        stale_while_revalidate: Serve stale themes while refreshing them
        max_size: Maximum cached themes (LRU eviction), None for unbounded
        validation_mode: "strict" or "coerce"
        clock: Millisecond clock, for tests

    Returns:
        ThemeResolver with resolve, get, invalidate, clear_cache
    """
    if validation_mode not in _VALIDATION_MODES:
        raise ValueError(
            f"Invalid validation mode: {validation_mode!r} "
            "(expected 'strict' or 'coerce')"
        )

    return ThemeResolver(
        _schema=schema,
        _fetcher=fetcher,
        _cache=ResolverCache(max_size=max_size, clock=clock),
        _ttl=parse_duration(ttl),
        _stale_while_revalidate=stale_while_revalidate,
        _validation_mode=validation_mode,
    )


__all__ = ["ThemeResolver", "create_resolver"]
