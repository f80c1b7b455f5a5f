"""
chunk_schema - schema and table addressing for chunk-based time-series storage.

Maps timestamps and tenants to index tables, chunk tables and per-day
index buckets across multiple schema generations.
"""

from chunk_schema.core.buckets import Bucket
from chunk_schema.core.daytime import DayTime
from chunk_schema.core.period import PeriodConfig
from chunk_schema.core.periodic_table import PeriodicTableConfig, TableDesc
from chunk_schema.core.schema import SchemaConfig

__all__ = [
    "Bucket",
    "DayTime",
    "PeriodConfig",
    "PeriodicTableConfig",
    "SchemaConfig",
    "TableDesc",
]
