"""
Compact duration encoding.

Table periods are written as short unit strings such as "1w", "24h" or
"1d12h". This module converts between that form and timedelta, and is
kept separate from the YAML loader so the codec can be used and tested
on its own.
"""

import re
from datetime import timedelta
from typing import List, Tuple

from .errors import DurationParseError

_MS = 1
_SECOND = 1000 * _MS
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY
_YEAR = 365 * _DAY

_DURATION_RE = re.compile(
    r"^((?P<y>[0-9]+)y)?((?P<w>[0-9]+)w)?((?P<d>[0-9]+)d)?((?P<h>[0-9]+)h)?"
    r"((?P<m>[0-9]+)m)?((?P<s>[0-9]+)s)?((?P<ms>[0-9]+)ms)?$"
)

_UNITS: List[Tuple[str, int]] = [
    ("y", _YEAR),
    ("w", _WEEK),
    ("d", _DAY),
    ("h", _HOUR),
    ("m", _MINUTE),
    ("s", _SECOND),
    ("ms", _MS),
]


def parse_duration(value: str) -> timedelta:
    """Parse a compact duration string such as "1w" or "6h30m".

    Args:
        value: Duration string; units must appear largest first

    Returns:
        The parsed duration

    Raises:
        DurationParseError: If the string is empty or malformed
    """
    if not isinstance(value, str):
        raise DurationParseError(f"duration must be a string, got {value!r}")
    text = value.strip()
    if text == "0":
        return timedelta(0)
    match = _DURATION_RE.match(text)
    if not text or not match:
        raise DurationParseError(f"not a valid duration string: {value!r}")

    total_ms = 0
    for unit, mult in _UNITS:
        amount = match.group(unit)
        if amount is not None:
            total_ms += int(amount) * mult
    return timedelta(milliseconds=total_ms)


def format_duration(value: timedelta) -> str:
    """Format a duration in its canonical compact form.

    Whole multiples of a week are written in weeks; anything else is
    broken into days, hours, minutes, seconds and milliseconds.

    Raises:
        ValueError: If the duration is negative or not whole milliseconds
    """
    if value < timedelta(0):
        raise ValueError(f"negative durations cannot be formatted: {value}")
    if value % timedelta(milliseconds=1):
        raise ValueError(f"duration must be whole milliseconds: {value}")

    ms = value // timedelta(milliseconds=1)
    if ms == 0:
        return "0s"
    if ms % _WEEK == 0:
        return f"{ms // _WEEK}w"

    parts = []
    for unit, mult in _UNITS[2:]:
        amount, ms = divmod(ms, mult)
        if amount:
            parts.append(f"{amount}{unit}")
    return "".join(parts)
