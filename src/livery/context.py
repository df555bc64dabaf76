"""Theme context - the application's current theme as an explicit object.

A ThemeContext is created at application start, handed to whatever renders
themed output, and closed on shutdown. It holds the current theme id, the
resolved theme and its CSS, and notifies subscribers when they change.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from types import TracebackType
from typing import Protocol, runtime_checkable

from livery.css import CssVariableOptions, to_css_string
from livery.errors import LiveryError
from livery.resolver import ThemeResolver
from livery.types import Theme

logger = logging.getLogger(__name__)


class ContextStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@runtime_checkable
class ThemeStorage(Protocol):
    """Where a chosen theme id is remembered (cookie, local file, ...)."""

    def save(self, theme_id: str) -> None:
        """Persist the user's theme preference."""
        ...


@dataclass(frozen=True, slots=True)
class ThemeSnapshot:
    """Immutable view of the context state handed to subscribers."""

    status: ContextStatus = ContextStatus.IDLE
    theme_id: str | None = None
    theme: Theme | None = None
    css: str = ""
    error: LiveryError | None = None


Listener = Callable[[ThemeSnapshot], None]


class ThemeContext:
    """Current-theme state for one application.

    Usage:
        async with ThemeContext(resolver, default_theme_id="acme") as ctx:
            ctx.subscribe(lambda snapshot: render(snapshot.css))
            await ctx.set_theme("globex")
    """

    def __init__(
        self,
        resolver: ThemeResolver,
        *,
        default_theme_id: str | None = None,
        storage: ThemeStorage | None = None,
        css_options: CssVariableOptions | None = None,
        selector: str = ":root",
    ) -> None:
        self._resolver = resolver
        self._default_theme_id = default_theme_id
        self._storage = storage
        self._css_options = css_options
        self._selector = selector
        self._initial = ThemeSnapshot(theme_id=default_theme_id)
        self._snapshot = self._initial
        self._listeners: list[Listener] = []
        self._closed = False

    @property
    def snapshot(self) -> ThemeSnapshot:
        return self._snapshot

    @property
    def status(self) -> ContextStatus:
        return self._snapshot.status

    @property
    def theme_id(self) -> str | None:
        return self._snapshot.theme_id

    @property
    def theme(self) -> Theme | None:
        return self._snapshot.theme

    @property
    def css(self) -> str:
        return self._snapshot.css

    @property
    def error(self) -> LiveryError | None:
        return self._snapshot.error

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def start(self) -> None:
        """Resolve the default theme, if one was configured."""
        self._ensure_open()
        if self._default_theme_id is not None:
            await self._load(self._default_theme_id)

    async def set_theme(self, theme_id: str) -> Theme:
        """Switch to ``theme_id``, remembering the choice in storage.

        Raises:
            LiveryError: If the theme cannot be resolved. The error is also
                recorded on the context.
        """
        self._ensure_open()
        self._persist(theme_id)
        return await self._load(theme_id)

    async def refresh(self) -> Theme | None:
        """Refetch the current theme, bypassing freshness."""
        self._ensure_open()
        theme_id = self._snapshot.theme_id
        if theme_id is None:
            return None
        return await self._load(theme_id, force=True)

    def reset(self) -> None:
        """Return to the initial, unresolved state."""
        self._update(self._initial)

    def close(self) -> None:
        """Tear down: drop listeners and refuse further theme changes."""
        self._listeners.clear()
        self._closed = True

    async def __aenter__(self) -> ThemeContext:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    async def _load(self, theme_id: str, *, force: bool = False) -> Theme:
        self._update(
            replace(self._snapshot, theme_id=theme_id, status=ContextStatus.LOADING)
        )
        try:
            if force:
                theme = await self._resolver.revalidate(theme_id)
            else:
                theme = await self._resolver.resolve(theme_id)
        except LiveryError as exc:
            if self._snapshot.theme_id == theme_id:
                failed = replace(self._snapshot, status=ContextStatus.ERROR, error=exc)
                self._update(failed)
            raise

        # A later set_theme() superseded this one while it was resolving
        if self._snapshot.theme_id != theme_id:
            return theme

        css = to_css_string(
            self._resolver.schema, theme, self._css_options, selector=self._selector
        )
        self._update(
            ThemeSnapshot(
                status=ContextStatus.READY, theme_id=theme_id, theme=theme, css=css
            )
        )
        return theme

    def _persist(self, theme_id: str) -> None:
        if self._storage is None:
            return
        # Best effort
        try:
            self._storage.save(theme_id)
        except Exception:
            logger.debug("Could not persist theme %r", theme_id, exc_info=True)

    def _update(self, snapshot: ThemeSnapshot) -> None:
        if snapshot == self._snapshot:
            return
        self._snapshot = snapshot
        for listener in list(self._listeners):
            listener(snapshot)

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("ThemeContext is closed")


__all__ = [
    "ContextStatus",
    "ThemeContext",
    "ThemeSnapshot",
    "ThemeStorage",
]
