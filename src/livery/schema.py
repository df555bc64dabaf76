"""Token schema definitions.

This module provides:
- TokenDefinition: an immutable, typed, defaulted leaf
- t: fluent builders for token definitions (``t.color("#fff")``)
- create_schema(): validates a nested definition tree into a Schema
- Schema: the single source of truth for theme shape, types and defaults
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any

from livery.errors import SchemaDefinitionError
from livery.paths import join_path
from livery.types import TOKEN_TYPES, Theme, TokenType, TokenValue
from livery.validators import validate_value

# =============================================================================
# Token definitions
# =============================================================================


@dataclass(frozen=True, slots=True)
class TokenDefinition:
    """A single named, typed, defaultable design value."""

    type: TokenType
    default_value: TokenValue | None = None
    description: str | None = None

    def default(self, value: TokenValue) -> TokenDefinition:
        """Return a copy with ``value`` as the default."""
        return replace(self, default_value=value)

    def describe(self, text: str) -> TokenDefinition:
        """Return a copy with a human-readable description."""
        return replace(self, description=text)


# A nested definition tree: groups are mappings, leaves are tokens
SchemaDefinition = Mapping[str, Any]


class TokenBuilders:
    """Factory namespace for token definitions.

    Usage:
        t.color("#3b82f6")
        t.dimension().default("1rem").describe("Base spacing unit")
    """

    __slots__ = ()

    @staticmethod
    def _build(
        token_type: TokenType, default: TokenValue | None, description: str | None
    ) -> TokenDefinition:
        return TokenDefinition(token_type, default, description)

    def color(
        self, default: str | None = None, *, description: str | None = None
    ) -> TokenDefinition:
        return self._build("color", default, description)

    def dimension(
        self, default: str | None = None, *, description: str | None = None
    ) -> TokenDefinition:
        return self._build("dimension", default, description)

    def number(
        self, default: int | float | None = None, *, description: str | None = None
    ) -> TokenDefinition:
        return self._build("number", default, description)

    def string(
        self, default: str | None = None, *, description: str | None = None
    ) -> TokenDefinition:
        return self._build("string", default, description)

    def boolean(
        self, default: bool | None = None, *, description: str | None = None
    ) -> TokenDefinition:
        return self._build("boolean", default, description)

    def font_family(
        self, default: str | None = None, *, description: str | None = None
    ) -> TokenDefinition:
        return self._build("fontFamily", default, description)

    def font_weight(
        self, default: int | str | None = None, *, description: str | None = None
    ) -> TokenDefinition:
        return self._build("fontWeight", default, description)

    def shadow(
        self, default: str | None = None, *, description: str | None = None
    ) -> TokenDefinition:
        return self._build("shadow", default, description)

    def url(
        self, default: str | None = None, *, description: str | None = None
    ) -> TokenDefinition:
        return self._build("url", default, description)


t = TokenBuilders()


# =============================================================================
# Definition validation
# =============================================================================


def _as_token(node: Any, path: str) -> TokenDefinition | None:
    """Return the token a node describes, or None if it is a group."""
    if isinstance(node, TokenDefinition):
        token = node
    elif isinstance(node, Mapping) and isinstance(node.get("type"), str):
        # Plain mapping form, e.g. loaded from JSON
        token = TokenDefinition(
            type=node["type"],
            default_value=node.get("default"),
            description=node.get("description"),
        )
    else:
        return None

    if token.type not in TOKEN_TYPES:
        raise SchemaDefinitionError(f"unknown token type {token.type!r}", path=path)
    if token.default_value is None:
        raise SchemaDefinitionError("token has no default value", path=path)
    try:
        normalized = validate_value(token.default_value, token.type)
    except ValueError as exc:
        raise SchemaDefinitionError(
            f"default {token.default_value!r} is not a valid {token.type}: {exc}",
            path=path,
        ) from None
    return replace(token, default_value=normalized)


def _build_tree(
    node: Any,
    prefix: tuple[str, ...],
    visiting: set[int],
    leaves: list[tuple[tuple[str, ...], TokenDefinition]],
) -> Mapping[str, Any]:
    """Validate a group recursively, collecting leaves in definition order."""
    path = join_path(prefix)
    if not isinstance(node, Mapping):
        raise SchemaDefinitionError(
            f"expected object, got {type(node).__name__}", path=path
        )
    if id(node) in visiting:
        raise SchemaDefinitionError("circular reference detected", path=path)

    visiting.add(id(node))
    group: dict[str, Any] = {}
    for key, value in node.items():
        if not isinstance(key, str) or not key or "." in key:
            raise SchemaDefinitionError(
                f"invalid key {key!r} (keys must be non-empty strings without '.')",
                path=path,
            )
        segments = (*prefix, key)
        if not isinstance(value, Mapping) and not isinstance(value, TokenDefinition):
            raise SchemaDefinitionError(
                f"expected token or group, got {type(value).__name__}",
                path=join_path(segments),
            )

        token = _as_token(value, join_path(segments))
        if token is not None:
            group[key] = token
            leaves.append((segments, token))
        else:
            group[key] = _build_tree(value, segments, visiting, leaves)
    visiting.discard(id(node))

    return MappingProxyType(group)


# =============================================================================
# Schema
# =============================================================================


class Schema:
    """Immutable tree of token definitions.

    Do not instantiate directly; use ``create_schema``.
    """

    __slots__ = ("_definition", "_index", "_leaves")

    def __init__(
        self,
        definition: Mapping[str, Any],
        leaves: tuple[tuple[tuple[str, ...], TokenDefinition], ...],
    ) -> None:
        self._definition = definition
        self._leaves = leaves
        self._index = {join_path(segments): token for segments, token in leaves}

    @property
    def definition(self) -> Mapping[str, Any]:
        """Read-only view of the normalized definition tree."""
        return self._definition

    @property
    def paths(self) -> tuple[str, ...]:
        """Dot paths of every leaf, in definition order."""
        return tuple(self._index)

    def tokens(self) -> Iterator[tuple[tuple[str, ...], TokenDefinition]]:
        """Iterate ``(segments, token)`` pairs in definition order."""
        return iter(self._leaves)

    def token_at(self, path: str) -> TokenDefinition | None:
        return self._index.get(path)

    def defaults(self) -> Theme:
        """Build a fresh default theme (every leaf set to its default)."""
        return _defaults_of(self._definition)

    def __contains__(self, path: object) -> bool:
        return path in self._index

    def __len__(self) -> int:
        return len(self._leaves)

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __repr__(self) -> str:
        return f"Schema({len(self._leaves)} tokens)"


def _defaults_of(definition: Mapping[str, Any]) -> Theme:
    return {
        key: value.default_value
        if isinstance(value, TokenDefinition)
        else _defaults_of(value)
        for key, value in definition.items()
    }


def create_schema(definition: SchemaDefinition) -> Schema:
    """Validate a nested definition tree and build an immutable Schema.

    Raises:
        SchemaDefinitionError: If a token type is unknown, a token has no
            valid default, a node is neither token nor group, a key is
            invalid, or the tree contains a cycle.
    """
    leaves: list[tuple[tuple[str, ...], TokenDefinition]] = []
    tree = _build_tree(definition, (), set(), leaves)
    return Schema(tree, tuple(leaves))


__all__ = [
    "Schema",
    "SchemaDefinition",
    "TokenBuilders",
    "TokenDefinition",
    "create_schema",
    "t",
]
