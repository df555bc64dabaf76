"""Dot-path helpers for schemas and themes."""

import re
from collections.abc import Mapping
from typing import Any

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])|([A-Z])([A-Z][a-z])")


def split_path(path: str) -> tuple[str, ...]:
    """Split ``"brand.primary"`` into ``("brand", "primary")``."""
    return tuple(path.split("."))


def join_path(segments: tuple[str, ...]) -> str:
    return ".".join(segments)


def get_at_path(tree: Mapping[str, Any], path: str) -> Any | None:
    """Read a value from a nested mapping by dot path.

    Returns None when any segment is missing. A path may point at a leaf
    or at a whole subtree.
    """
    current: Any = tree
    for segment in split_path(path):
        if not isinstance(current, Mapping) or segment not in current:
            return None
        current = current[segment]
    return current


def to_kebab_case(segment: str) -> str:
    """Convert one camelCase path segment to kebab-case.

    ``primaryColor`` -> ``primary-color``, ``HTMLTitle`` -> ``html-title``.
    """

    def replace(match: re.Match[str]) -> str:
        if match.group(1):
            return f"{match.group(1)}-{match.group(2)}"
        return f"{match.group(3)}-{match.group(4)}"

    return _CAMEL_BOUNDARY.sub(replace, segment).lower()
