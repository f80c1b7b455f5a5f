"""
Periodic table naming.

A table family rotates to a new physical table every `period`, counted
in whole periods since the Unix epoch.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from types import MappingProxyType
from typing import Dict, List, Mapping

from .daytime import to_millis


@dataclass(frozen=True)
class TableDesc:
    """A physical table a time range touches."""
    name: str
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PeriodicTableConfig:
    """Configuration of one table family.

    A zero period means a single static table named exactly `prefix`.
    """
    prefix: str = ""
    period: timedelta = timedelta(0)
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate the period and freeze the tags."""
        if not isinstance(self.period, timedelta):
            raise ValueError(f"period must be a timedelta, got {self.period!r}")
        if self.period < timedelta(0):
            raise ValueError("period cannot be negative")
        if self.period % timedelta(milliseconds=1):
            raise ValueError("period must be a whole number of milliseconds")
        # Tags are read-only and never alias the caller's dict.
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))

    def __hash__(self):
        return hash((self.prefix, self.period, frozenset(self.tags.items())))

    @property
    def period_ms(self) -> int:
        return self.period // timedelta(milliseconds=1)

    def table_index(self, t) -> int:
        """Index of the period containing `t`, using floor division.

        A timestamp exactly on a boundary belongs to the period that
        starts there.
        """
        return to_millis(t) // self.period_ms

    def table_for(self, t) -> str:
        """Name of the table active at `t` (epoch ms, datetime or DayTime)."""
        if self.period_ms == 0:
            return self.prefix
        return f"{self.prefix}{self.table_index(t)}"

    def periodic_tables(self, from_time, through_time) -> List[TableDesc]:
        """Every table touched by the closed range [from_time, through_time].

        Returns:
            Tables in ascending order, each carrying this family's tags
        """
        if self.period_ms == 0:
            return [TableDesc(name=self.prefix, tags=dict(self.tags))]

        first = self.table_index(from_time)
        last = self.table_index(through_time)
        return [
            TableDesc(name=f"{self.prefix}{i}", tags=dict(self.tags))
            for i in range(first, last + 1)
        ]
