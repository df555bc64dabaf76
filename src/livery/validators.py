"""Per-type token value validators.

Each validator takes an untrusted value and either returns the normalized
value or raises ``ValueError`` with a human-readable message. The grammars
are deliberately conservative: anything outside them is rejected.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from typing import Any
from urllib.parse import urlsplit

from livery.types import TokenType, TokenValue

_HEX_COLOR = re.compile(
    r"^#([0-9a-f]{3}|[0-9a-f]{4}|[0-9a-f]{6}|[0-9a-f]{8})$", re.IGNORECASE
)
_ALPHA = r"(0|1|0?\.\d+|1\.0+)"
_CHANNEL = r"\s*(\d{1,3})\s*"
_RGB_COLOR = re.compile(
    r"^rgba?\(" + _CHANNEL + "," + _CHANNEL + "," + _CHANNEL
    + r"(,\s*" + _ALPHA + r")?\s*\)$"
)
_HSL_COLOR = re.compile(
    r"^hsla?\(\s*\d{1,3}\s*,\s*(\d{1,3})%\s*,\s*(\d{1,3})%\s*"
    + r"(,\s*" + _ALPHA + r")?\s*\)$"
)

_LENGTH_UNITS = (
    "px|rem|em|%|vh|vw|vmin|vmax|ch|ex|cm|mm|in|pt|pc|svh|svw|dvh|dvw|lvh|lvw"
)
_DIMENSION = re.compile(r"^-?(\d+\.?\d*|\.\d+)(" + _LENGTH_UNITS + r")$")
_SHADOW_LENGTH = re.compile(
    r"^-?(\d+\.?\d*|\.\d+)(px|rem|em|%|vh|vw|vmin|vmax|ch|ex|cm|mm|in|pt|pc)?"
)

_GLOBAL_KEYWORDS = frozenset(("inherit", "initial", "unset"))
_FONT_WEIGHT_KEYWORDS = (
    frozenset(("normal", "bold", "bolder", "lighter")) | _GLOBAL_KEYWORDS
)

_URL_SCHEMES = frozenset(("http", "https", "data"))
_DANGEROUS_DATA_MIMES = (
    "text/html",
    "application/javascript",
    "application/x-javascript",
)

# CSS Color Level 4 named colors plus special keywords
CSS_NAMED_COLORS = frozenset(
    """
    transparent currentcolor inherit initial unset
    aliceblue antiquewhite aqua aquamarine azure beige bisque black
    blanchedalmond blue blueviolet brown burlywood cadetblue chartreuse
    chocolate coral cornflowerblue cornsilk crimson cyan darkblue darkcyan
    darkgoldenrod darkgray darkgreen darkgrey darkkhaki darkmagenta
    darkolivegreen darkorange darkorchid darkred darksalmon darkseagreen
    darkslateblue darkslategray darkslategrey darkturquoise darkviolet
    deeppink deepskyblue dimgray dimgrey dodgerblue firebrick floralwhite
    forestgreen fuchsia gainsboro ghostwhite gold goldenrod gray green
    greenyellow grey honeydew hotpink indianred indigo ivory khaki lavender
    lavenderblush lawngreen lemonchiffon lightblue lightcoral lightcyan
    lightgoldenrodyellow lightgray lightgreen lightgrey lightpink lightsalmon
    lightseagreen lightskyblue lightslategray lightslategrey lightsteelblue
    lightyellow lime limegreen linen magenta maroon mediumaquamarine
    mediumblue mediumorchid mediumpurple mediumseagreen mediumslateblue
    mediumspringgreen mediumturquoise mediumvioletred midnightblue mintcream
    mistyrose moccasin navajowhite navy oldlace olive olivedrab orange
    orangered orchid palegoldenrod palegreen paleturquoise palevioletred
    papayawhip peachpuff peru pink plum powderblue purple rebeccapurple red
    rosybrown royalblue saddlebrown salmon sandybrown seagreen seashell
    sienna silver skyblue slateblue slategray slategrey snow springgreen
    steelblue tan teal thistle tomato turquoise violet wheat white
    whitesmoke yellow yellowgreen
    """.split()
)


def _require_str(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("expected string")
    return value


def validate_color(value: Any) -> str:
    trimmed = _require_str(value).strip()
    lower = trimmed.lower()
    if lower in CSS_NAMED_COLORS:
        return lower

    if _HEX_COLOR.match(trimmed):
        return trimmed

    rgb = _RGB_COLOR.match(trimmed)
    if rgb and all(int(channel) <= 255 for channel in rgb.group(1, 2, 3)):
        return trimmed

    hsl = _HSL_COLOR.match(trimmed)
    if hsl and all(int(pct) <= 100 for pct in hsl.group(1, 2)):
        return trimmed

    raise ValueError(
        "invalid color format (expected hex, rgb, rgba, hsl, hsla, or CSS named color)"
    )


def validate_dimension(value: Any) -> str:
    trimmed = _require_str(value).strip()
    if trimmed == "0" or _DIMENSION.match(trimmed):
        return trimmed
    raise ValueError(
        "invalid dimension format (expected number with unit like px, rem, em, %, etc.)"
    )


def validate_number(value: Any) -> int | float:
    # bool is an int subclass but never a number token
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("expected number")
    if not math.isfinite(value):
        raise ValueError("expected finite number")
    return value


def validate_string(value: Any) -> str:
    text = _require_str(value)
    if not text.strip():
        raise ValueError("string cannot be empty")
    return text


def validate_boolean(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError("expected boolean")
    return value


def validate_font_family(value: Any) -> str:
    trimmed = _require_str(value).strip()
    if not trimmed:
        raise ValueError("font family cannot be empty")
    return trimmed


def validate_font_weight(value: Any) -> int | float | str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if 1 <= value <= 1000:
            return value
        raise ValueError("font weight number must be between 1 and 1000")

    if isinstance(value, str):
        trimmed = value.strip()
        if trimmed.lower() in _FONT_WEIGHT_KEYWORDS:
            return trimmed.lower()
        try:
            number = float(trimmed)
        except ValueError:
            pass
        else:
            if math.isfinite(number) and 1 <= number <= 1000:
                return int(number) if number.is_integer() else number

    raise ValueError("invalid font weight (expected number 1-1000 or keyword)")


def _split_shadows(text: str) -> list[str]:
    """Split on top-level commas, leaving commas inside rgba() etc. alone."""
    shadows: list[str] = []
    current: list[str] = []
    depth = 0
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == "," and depth == 0:
            shadows.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        shadows.append(tail)
    return shadows


def _is_single_shadow(shadow: str) -> bool:
    rest = re.sub(r"^inset\s+", "", shadow.strip(), flags=re.IGNORECASE).strip()
    # offset-x and offset-y are required; blur, spread and color are not checked
    for _ in range(2):
        match = _SHADOW_LENGTH.match(rest)
        if not rest or not match:
            return False
        rest = rest[match.end() :].strip()
    return True


def validate_shadow(value: Any) -> str:
    trimmed = _require_str(value).strip()
    lower = trimmed.lower()
    if lower == "none" or lower in _GLOBAL_KEYWORDS:
        return lower
    if not trimmed:
        raise ValueError("shadow cannot be empty")

    shadows = _split_shadows(trimmed)
    if not shadows or not all(_is_single_shadow(shadow) for shadow in shadows):
        raise ValueError(
            "invalid shadow syntax "
            "(expected: [inset] offset-x offset-y [blur] [spread] [color])"
        )
    return trimmed


def validate_url(value: Any) -> str:
    trimmed = _require_str(value).strip()
    if not trimmed:
        raise ValueError("URL cannot be empty")

    if trimmed.startswith(("/", "./", "../", "#")):
        return trimmed

    parts = urlsplit(trimmed)
    scheme = parts.scheme.lower()
    if not scheme:
        raise ValueError("invalid URL format")
    if scheme not in _URL_SCHEMES:
        raise ValueError(
            f"unsafe URL protocol '{scheme}:' (allowed: http, https, data)"
        )

    if scheme == "data":
        mime = trimmed[5:].split(";", 1)[0].split(",", 1)[0].strip().lower()
        if any(dangerous in mime for dangerous in _DANGEROUS_DATA_MIMES):
            raise ValueError(f"dangerous data URL MIME type '{mime}' is not allowed")
    elif not parts.netloc:
        raise ValueError("invalid URL format")

    return trimmed


VALIDATORS: dict[str, Callable[[Any], TokenValue]] = {
    "string": validate_string,
    "color": validate_color,
    "dimension": validate_dimension,
    "fontFamily": validate_font_family,
    "number": validate_number,
    "boolean": validate_boolean,
    "fontWeight": validate_font_weight,
    "shadow": validate_shadow,
    "url": validate_url,
}


def validate_value(value: Any, token_type: TokenType) -> TokenValue:
    """Validate ``value`` against ``token_type`` and return it normalized."""
    try:
        validator = VALIDATORS[token_type]
    except KeyError:
        raise ValueError(f"unknown token type: {token_type}") from None
    return validator(value)


def coerce_value(value: Any, token_type: TokenType) -> TokenValue:
    """Like ``validate_value`` but tries lossless conversions before failing."""
    try:
        return validate_value(value, token_type)
    except ValueError as exc:
        error = exc

    if token_type == "number" and isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            pass
        else:
            if math.isfinite(number):
                return int(number) if number.is_integer() else number
    elif token_type == "boolean":
        if value in ("true", 1) and not isinstance(value, float):
            return True
        if value in ("false", 0) and not isinstance(value, float):
            return False
    elif token_type == "string":
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
    elif token_type == "dimension":
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if math.isfinite(value):
                return f"{value:g}px"

    raise error
