"""CSS custom-property serialization.

Themes are flattened in schema definition order, so the output is
deterministic regardless of how the theme dict was built.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from livery.paths import split_path, to_kebab_case
from livery.schema import Schema
from livery.types import Theme

_CSS_ESCAPE_MAP = {
    "\\": "\\\\",
    '"': '\\"',
    "'": "\\'",
    ";": "\\;",
    "{": "\\{",
    "}": "\\}",
    "\n": "\\n",
    "\r": "\\r",
}
_CSS_ESCAPE = re.compile(r"[\\\"';{}\n\r]")


def escape_css_value(value: str) -> str:
    """Escape characters that could break out of a declaration."""
    return _CSS_ESCAPE.sub(lambda match: _CSS_ESCAPE_MAP[match.group(0)], value)


def needs_css_escaping(value: str) -> bool:
    return _CSS_ESCAPE.search(value) is not None


@dataclass(frozen=True, slots=True)
class CssVariableOptions:
    """How theme paths become custom-property names."""

    prefix: str = ""
    separator: str = "-"
    transform_name: Callable[[str], str] = to_kebab_case


_DEFAULT_OPTIONS = CssVariableOptions()


def variable_name(
    segments: tuple[str, ...], options: CssVariableOptions | None = None
) -> str:
    """Build ``--prefix-a-b`` from path segments."""
    opts = options or _DEFAULT_OPTIONS
    parts = [opts.transform_name(segment) for segment in segments]
    if opts.prefix:
        parts.insert(0, opts.prefix)
    return "--" + opts.separator.join(parts)


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, float) and value.is_integer():
        text = str(int(value))
    else:
        text = str(value)
    return escape_css_value(text.strip())


def _leaf(theme: Mapping[str, Any], segments: tuple[str, ...]) -> Any:
    node: Any = theme
    for segment in segments:
        node = node[segment]
    return node


def to_css_variables(
    schema: Schema, theme: Theme, options: CssVariableOptions | None = None
) -> dict[str, str]:
    """Flatten a theme into ``{"--brand-primary": "#3b82f6", ...}``."""
    return {
        variable_name(segments, options): _format_value(_leaf(theme, segments))
        for segments, _token in schema.tokens()
    }


def _format_block(selector: str, variables: Mapping[str, str]) -> str:
    declarations = "\n".join(f"  {name}: {value};" for name, value in variables.items())
    return f"{selector} {{\n{declarations}\n}}"


def to_css_string(
    schema: Schema,
    theme: Theme,
    options: CssVariableOptions | None = None,
    *,
    selector: str = ":root",
) -> str:
    """Render a theme as a single CSS rule, ``:root`` by default.

    Returns an empty string for a schema with no tokens.
    """
    variables = to_css_variables(schema, theme, options)
    if not variables:
        return ""
    return _format_block(selector, variables)


def _attribute_selector(attribute: str, theme_id: str) -> str:
    escaped = theme_id.replace("\\", "\\\\").replace('"', '\\"')
    return f'[{attribute}="{escaped}"]'


def to_css_string_all(
    schema: Schema,
    themes: Mapping[str, Theme],
    default_theme: str,
    options: CssVariableOptions | None = None,
    *,
    attribute: str = "data-theme",
) -> str:
    """Render a pre-bundled set of themes, one attribute-scoped rule each.

    The default theme is also emitted under ``:root`` first, so the page is
    styled before any ``data-theme`` attribute is set.

    Raises:
        ValueError: If ``default_theme`` is not a key of ``themes``.
    """
    if default_theme not in themes:
        raise ValueError(
            f"default_theme {default_theme!r} is not in themes: {', '.join(themes)}"
        )

    blocks: list[str] = []
    root_variables = to_css_variables(schema, themes[default_theme], options)
    if root_variables:
        blocks.append(_format_block(":root", root_variables))

    for theme_id, theme in themes.items():
        variables = to_css_variables(schema, theme, options)
        if variables:
            selector = _attribute_selector(attribute, theme_id)
            blocks.append(_format_block(selector, variables))

    return "\n\n".join(blocks)


def css_var(path: str, options: CssVariableOptions | None = None) -> str:
    """Reference a token by dot path: ``css_var("brand.primary")``."""
    return f"var({variable_name(split_path(path), options)})"


def create_css_var_helper(
    schema: Schema, options: CssVariableOptions | None = None
) -> Callable[[str], str]:
    """Build a ``css_var`` bound to one schema that rejects unknown paths.

    Usage:
        var = create_css_var_helper(schema, CssVariableOptions(prefix="lv"))
        var("brand.primary")  # "var(--lv-brand-primary)"
    """

    def helper(path: str) -> str:
        if path not in schema:
            raise KeyError(f"Unknown token path: {path!r}")
        return css_var(path, options)

    return helper


__all__ = [
    "CssVariableOptions",
    "create_css_var_helper",
    "css_var",
    "escape_css_value",
    "needs_css_escaping",
    "to_css_string",
    "to_css_string_all",
    "to_css_variables",
    "variable_name",
]
