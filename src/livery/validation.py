"""Merge partial theme payloads with schema defaults.

``merge`` is the only way a Theme is produced from untrusted input: absent
values take the schema default, present values must satisfy their token
type, and the result always carries exactly the schema's leaves.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from livery.errors import ValidationError, ValidationIssue
from livery.paths import join_path, split_path
from livery.schema import Schema, TokenDefinition
from livery.types import Theme, TokenType, TokenValue, ValidationMode
from livery.validators import coerce_value, validate_value

Check = Callable[[Any, TokenType], TokenValue]

_CHECKS: dict[str, Check] = {
    "strict": validate_value,
    "coerce": coerce_value,
}


def _check_for(mode: ValidationMode) -> Check:
    try:
        return _CHECKS[mode]
    except KeyError:
        raise ValueError(
            f"Invalid validation mode: {mode!r} (expected 'strict' or 'coerce')"
        ) from None


def _walk(
    definition: Mapping[str, Any],
    data: Mapping[str, Any],
    check: Check,
    prefix: tuple[str, ...],
    issues: list[ValidationIssue],
    *,
    fill_defaults: bool,
) -> dict[str, Any]:
    result: dict[str, Any] = {}

    for key, node in definition.items():
        segments = (*prefix, key)
        # None is treated like a missing key
        value = data.get(key)

        if isinstance(node, TokenDefinition):
            if value is None:
                if fill_defaults:
                    result[key] = node.default_value
                continue
            try:
                result[key] = check(value, node.type)
            except ValueError as exc:
                issues.append(
                    ValidationIssue(
                        path=join_path(segments),
                        expected=node.type,
                        message=str(exc),
                        received=value,
                    )
                )
            continue

        if value is None:
            if fill_defaults:
                result[key] = _walk(
                    node, {}, check, segments, issues, fill_defaults=True
                )
            continue

        if not isinstance(value, Mapping):
            issues.append(
                ValidationIssue(
                    path=join_path(segments),
                    expected="object",
                    message="expected object for nested group",
                    received=value,
                )
            )
            continue

        nested = _walk(
            node, value, check, segments, issues, fill_defaults=fill_defaults
        )
        if fill_defaults or nested:
            result[key] = nested

    return result


def _root_payload(data: Any) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValidationError(
            [
                ValidationIssue(
                    path="",
                    expected="object",
                    message="expected object for theme payload",
                    received=data,
                )
            ]
        )
    return data


def _expand_dotted(data: Mapping[str, Any]) -> Mapping[str, Any]:
    """Nest flat keys such as ``"brand.primary"`` the way the schema nests them.

    A dotted key wins over the same leaf given in nested form.
    """
    if not any(isinstance(key, str) and "." in key for key in data):
        return data

    expanded: dict[str, Any] = {}
    dotted: list[tuple[str, Any]] = []
    for key, value in data.items():
        if isinstance(key, str) and "." in key:
            dotted.append((key, value))
        else:
            expanded[key] = value

    for key, value in dotted:
        *parents, leaf = split_path(key)
        node = expanded
        for segment in parents:
            child = node.get(segment)
            # Copied so the caller's payload is never mutated
            child = dict(child) if isinstance(child, Mapping) else {}
            node[segment] = child
            node = child
        node[leaf] = value
    return expanded


def merge(
    schema: Schema, partial: Any = None, *, mode: ValidationMode = "strict"
) -> Theme:
    """Combine a partial payload with schema defaults into a complete Theme.

    Args:
        schema: Schema that defines shape, types and defaults
        partial: Nested mapping that may omit any leaf or subtree; top-level
            dotted keys such as ``"brand.primary"`` are accepted too
        mode: "strict" rejects any mistyped value; "coerce" first tries
            lossless conversions such as "16" -> 16 for number tokens

    Returns:
        A new Theme with every schema leaf populated

    Raises:
        ValidationError: If any present value fails its token type. Every
            failing path is reported, not just the first.
    """
    check = _check_for(mode)
    data = _expand_dotted(_root_payload(partial))
    issues: list[ValidationIssue] = []
    theme = _walk(schema.definition, data, check, (), issues, fill_defaults=True)
    if issues:
        raise ValidationError(issues)
    return theme


def validate_partial(
    schema: Schema, data: Any, *, mode: ValidationMode = "strict"
) -> dict[str, Any]:
    """Validate only the values present in ``data``.

    Returns the normalized partial tree without filling defaults, which is
    what an override payload should be stored as.
    """
    check = _check_for(mode)
    payload = _expand_dotted(_root_payload(data))
    issues: list[ValidationIssue] = []
    result = _walk(schema.definition, payload, check, (), issues, fill_defaults=False)
    if issues:
        raise ValidationError(issues)
    return result


__all__ = ["merge", "validate_partial"]
