"""Shared pytest fixtures."""

from collections.abc import Callable
from typing import Any

import pytest

from livery import Schema, create_schema, t


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class CountingFetcher:
    """Async fetcher that records every call."""

    def __init__(self, payload: Callable[[str, int], Any] | dict | None = None) -> None:
        self.calls: list[str] = []
        self._payload = payload

    @property
    def count(self) -> int:
        return len(self.calls)

    async def __call__(self, theme_id: str) -> Any:
        self.calls.append(theme_id)
        if callable(self._payload):
            return self._payload(theme_id, self.count)
        return self._payload or {}


@pytest.fixture
def schema() -> Schema:
    """Create a small but nested schema for each test."""
    return create_schema(
        {
            "brand": {
                "primary": t.color("#3b82f6"),
                "secondary": t.color("#64748b"),
            },
            "spacing": {
                "sm": t.dimension("0.5rem"),
                "md": t.dimension("1rem"),
            },
            "typography": {
                "fontFamily": t.font_family("Inter, sans-serif"),
                "scale": t.number(1.25),
            },
        }
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fetcher() -> CountingFetcher:
    """Fetcher whose payload changes the primary color on every call."""
    colors = ["#111111", "#222222", "#333333", "#444444", "#555555"]
    return CountingFetcher(
        lambda theme_id, count: {"brand": {"primary": colors[(count - 1) % 5]}}
    )
