"""Error taxonomy for livery."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class LiveryError(Exception):
    """Base class for all livery errors."""


class SchemaDefinitionError(LiveryError):
    """A schema definition is malformed.

    Raised by ``create_schema``. This is a programming error and is never
    caught inside the library.
    """

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        where = path or "root"
        super().__init__(f'Invalid schema definition at "{where}": {message}')


class FetchError(LiveryError):
    """The external fetcher raised while loading a theme.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, theme_id: str, cause: BaseException) -> None:
        self.theme_id = theme_id
        super().__init__(f'Failed to fetch theme "{theme_id}": {cause!r}')


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One failing path in a theme payload."""

    path: str
    expected: str
    message: str
    received: Any = None

    def __str__(self) -> str:
        return f"{self.path}: {self.message} (expected {self.expected})"


class ValidationError(LiveryError):
    """A present override value does not satisfy its declared token type."""

    def __init__(
        self, issues: list[ValidationIssue], *, theme_id: str | None = None
    ) -> None:
        self.issues = list(issues)
        self.theme_id = theme_id
        details = ", ".join(str(issue) for issue in self.issues)
        if theme_id is None:
            message = f"Invalid theme data: {details}"
        else:
            message = f'Invalid theme data for theme "{theme_id}": {details}'
        super().__init__(message)

    @property
    def paths(self) -> list[str]:
        return [issue.path for issue in self.issues]


__all__ = [
    "FetchError",
    "LiveryError",
    "SchemaDefinitionError",
    "ValidationError",
    "ValidationIssue",
]
