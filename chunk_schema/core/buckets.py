"""
Index bucketing.

Splits a time range into per-day (or, for the legacy schemas, per-hour)
buckets. Each bucket names the index table to use and the hash key that
addresses one tenant's rows for that day, together with the part of the
day the range covers.
"""

from dataclasses import dataclass
from typing import List

from .daytime import MILLISECONDS_IN_DAY, MILLISECONDS_IN_HOUR, to_millis
from .periodic_table import PeriodicTableConfig


@dataclass(frozen=True)
class Bucket:
    """One day (or hour) of one tenant's index rows.

    `relative_from` and `relative_through` are millisecond offsets from
    the start of the bucket.
    """
    relative_from: int
    relative_through: int
    table_name: str
    hash_key: str
    bucket_size: int


def daily_buckets(
    index_tables: PeriodicTableConfig,
    from_time,
    through_time,
    user_id: str,
) -> List[Bucket]:
    """Split [from_time, through_time) into calendar-day buckets.

    The last day is included even when `through_time` falls exactly on
    its midnight, in which case its bucket is empty (0..0). A zero-length
    range yields exactly one bucket.

    Args:
        index_tables: Table family the buckets are written to
        from_time: Range start (epoch ms, datetime or DayTime)
        through_time: Range end
        user_id: Tenant the hash keys are built for

    Returns:
        Buckets ordered by day
    """
    return _buckets(
        index_tables, from_time, through_time, MILLISECONDS_IN_DAY,
        lambda i: f"{user_id}:d{i}",
    )


def hourly_buckets(
    index_tables: PeriodicTableConfig,
    from_time,
    through_time,
    user_id: str,
) -> List[Bucket]:
    """Split a range into hour buckets, as used by the v1 and v2 schemas."""
    return _buckets(
        index_tables, from_time, through_time, MILLISECONDS_IN_HOUR,
        lambda i: f"{user_id}:{i}",
    )


def _buckets(index_tables, from_time, through_time, size, hash_key_for) -> List[Bucket]:
    start = to_millis(from_time)
    end = to_millis(through_time)

    result = []
    for i in range(start // size, end // size + 1):
        bucket_start = i * size
        result.append(Bucket(
            relative_from=max(0, start - bucket_start),
            relative_through=min(size, end - bucket_start),
            table_name=index_tables.table_for(bucket_start),
            hash_key=hash_key_for(i),
            bucket_size=size,
        ))
    return result
