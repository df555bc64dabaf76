"""Duration parsing utilities."""

import re
from datetime import timedelta

from livery.types import Duration

_DURATION_PATTERN = re.compile(r"^(\d+)(ms|s|m|h|d)$")
_UNITS: dict[str, int] = {
    "ms": 1,
    "s": 1000,
    "m": 60_000,
    "h": 3_600_000,
    "d": 86_400_000,
}


def parse_duration(duration: Duration) -> int:
    """Parse a duration to milliseconds. Integers are already milliseconds."""
    if isinstance(duration, timedelta):
        if duration < timedelta(0):
            raise ValueError(f"Invalid duration: {duration!r}")
        return int(duration.total_seconds() * 1000)
    if isinstance(duration, bool):
        raise ValueError(f"Invalid duration: {duration!r}")
    if isinstance(duration, int):
        if duration < 0:
            raise ValueError(f"Invalid duration: {duration!r}")
        return duration

    match = _DURATION_PATTERN.match(duration.strip())
    if not match:
        raise ValueError(f"Invalid duration: {duration!r}")

    value, unit = match.groups()
    return int(value) * _UNITS[unit]


def parse_seconds(duration: Duration) -> int:
    """Parse a duration to whole seconds, as used in HTTP headers.

    Unlike ``parse_duration``, a bare integer is taken to be seconds.
    """
    if isinstance(duration, int) and not isinstance(duration, bool):
        if duration < 0:
            raise ValueError(f"Invalid duration: {duration!r}")
        return duration
    return parse_duration(duration) // 1000
