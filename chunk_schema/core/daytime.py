"""
Day-granularity timestamps.

All timestamps in this package are integer milliseconds since the Unix
epoch, UTC.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Union

MILLISECONDS_IN_HOUR = 60 * 60 * 1000
MILLISECONDS_IN_DAY = 24 * MILLISECONDS_IN_HOUR

DATE_FORMAT = "%Y-%m-%d"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def to_millis(value: Union[int, datetime, date, "DayTime"]) -> int:
    """Convert a supported time value to epoch milliseconds.

    Naive datetimes are treated as UTC; dates map to midnight UTC.
    """
    if isinstance(value, DayTime):
        return value.time
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return (value - _EPOCH) // _ONE_MS
    if isinstance(value, date):
        return to_millis(datetime(value.year, value.month, value.day, tzinfo=timezone.utc))
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"unsupported time value: {value!r}")
    return value


def from_millis(ms: int) -> datetime:
    """Epoch milliseconds to an aware UTC datetime."""
    return _EPOCH + ms * _ONE_MS


def parse_timestamp(value: str) -> int:
    """Parse an ISO-8601 date or datetime string to epoch milliseconds.

    A trailing 'Z' is accepted as UTC. Strings without an offset are UTC.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"invalid timestamp: {value!r}")
    return to_millis(parsed)


@dataclass(frozen=True, order=True)
class DayTime:
    """A point in time used as a period start.

    Parsed from a YYYY-MM-DD string it is midnight UTC of that day.
    Constructed directly it keeps the timestamp it is given.
    """
    time: int

    @classmethod
    def parse(cls, value: str) -> "DayTime":
        """Parse a YYYY-MM-DD calendar date.

        Raises:
            ValueError: If the string is not a calendar date
        """
        if not isinstance(value, str):
            raise ValueError(f"day time must be a 'YYYY-MM-DD' string, got {value!r}")
        try:
            parsed = datetime.strptime(value, DATE_FORMAT)
        except ValueError:
            raise ValueError(f"invalid day time {value!r}, expected 'YYYY-MM-DD'")
        # strptime accepts unpadded fields such as "2020-7-31"
        if parsed.strftime(DATE_FORMAT) != value:
            raise ValueError(f"invalid day time {value!r}, expected 'YYYY-MM-DD'")
        return cls(to_millis(parsed))

    @classmethod
    def from_datetime(cls, value: Union[datetime, date]) -> "DayTime":
        return cls(to_millis(value))

    def to_datetime(self) -> datetime:
        return from_millis(self.time)

    def unix(self) -> int:
        """Whole seconds since the epoch."""
        return self.time // 1000

    def __str__(self) -> str:
        return self.to_datetime().strftime(DATE_FORMAT)
