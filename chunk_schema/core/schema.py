"""
Multi-period schema configuration.

A SchemaConfig holds every schema generation a deployment has used,
ordered by activation time. New generations are appended with a later
start; lookups route each timestamp to the generation active at it.
"""

import bisect
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

from chunk_schema.logging_config import get_logger

from .daytime import to_millis
from .errors import IncreasingFromTimeError, PeriodNotFoundError
from .period import PeriodConfig

logger = get_logger(__name__)


@dataclass(frozen=True)
class SchemaConfig:
    """All schema generations of a deployment, oldest first."""
    configs: Tuple[PeriodConfig, ...] = ()

    def __post_init__(self):
        # Accept any sequence but always hold an immutable tuple.
        object.__setattr__(self, "configs", tuple(self.configs))

    def validate(self) -> "SchemaConfig":
        """Validate every period and the ordering between them.

        Unset row shard factors are defaulted on the way. The receiver is
        left untouched; use the returned configuration from here on.

        Returns:
            The validated configuration with defaults applied

        Raises:
            SchemaConfigError: The first problem found, in period order
        """
        validated = []
        for i, period in enumerate(self.configs):
            defaulted = period.with_defaults()
            if defaulted is not period:
                logger.debug(
                    "Defaulting row_shards to %d for schema %s starting %s",
                    defaulted.row_shards, period.schema, period.from_,
                )
            defaulted.validate()

            if i + 1 < len(self.configs) and period.from_ >= self.configs[i + 1].from_:
                raise IncreasingFromTimeError()
            validated.append(defaulted)

        return SchemaConfig(tuple(validated))

    def _index_for_time(self, t: int) -> int:
        starts = [period.from_.time for period in self.configs]
        return bisect.bisect_right(starts, t) - 1

    def schema_for_time(self, t) -> PeriodConfig:
        """The period active at `t`: the last one whose start is <= t.

        Raises:
            PeriodNotFoundError: If `t` is before the first period
        """
        ms = to_millis(t)
        i = self._index_for_time(ms)
        if i < 0:
            raise PeriodNotFoundError(ms)
        return self.configs[i]

    def chunk_table_for(self, t) -> str:
        """Name of the chunk table holding chunks written at `t`.

        Raises:
            PeriodNotFoundError: If `t` is before the first period
        """
        return self.schema_for_time(t).chunk_table_for(t)

    def index_table_for(self, t) -> str:
        return self.schema_for_time(t).index_table_for(t)

    def active_period_index(self, now: Optional[int] = None) -> int:
        """Index of the period active at `now` (defaults to the wall clock), or -1."""
        if now is None:
            now = int(time.time() * 1000)
        return self._index_for_time(to_millis(now))

    def split_by_period(self, from_time, through_time) -> List[Tuple[int, int, PeriodConfig]]:
        """Cut the closed range [from_time, through_time] at period starts.

        Returns:
            (segment_from, segment_through, period) for each period the
            range overlaps, oldest first. Time before the first period is
            dropped.
        """
        start = to_millis(from_time)
        end = to_millis(through_time)

        segments = []
        for i, period in enumerate(self.configs):
            period_start = period.from_.time
            if i + 1 < len(self.configs):
                period_end = self.configs[i + 1].from_.time - 1
            else:
                period_end = end

            segment_from = max(start, period_start)
            segment_through = min(end, period_end)
            if segment_from <= segment_through:
                segments.append((segment_from, segment_through, period))
        return segments

    def split_by_period_exclusive(self, from_time, through_time) -> List[Tuple[int, int, PeriodConfig]]:
        """Cut the half-open range [from_time, through_time) at period starts.

        A period superseded inside the range ends exactly at the next
        period's start, so the segments can be fed to daily_buckets
        without losing the last millisecond before a boundary. A
        zero-length range gives one zero-length segment in the period
        active at that instant.

        Returns:
            (segment_from, segment_through, period) for each period the
            range overlaps, oldest first, with exclusive ends
        """
        start = to_millis(from_time)
        end = to_millis(through_time)

        segments = []
        for i, period in enumerate(self.configs):
            segment_from = max(start, period.from_.time)
            next_start = self.configs[i + 1].from_.time if i + 1 < len(self.configs) else None
            if next_start is not None and next_start <= end:
                if segment_from < next_start:
                    segments.append((segment_from, next_start, period))
            elif segment_from < end or segment_from == start == end:
                segments.append((segment_from, end, period))
        return segments
