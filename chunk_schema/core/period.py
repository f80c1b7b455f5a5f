"""
Schema generations.

A PeriodConfig describes one generation of the storage schema: when it
becomes active, which backends it uses and how its index and chunk
tables are laid out.
"""

import dataclasses
import re
from dataclasses import dataclass, field
from datetime import timedelta
from functools import cached_property
from typing import List

from .buckets import Bucket, daily_buckets, hourly_buckets
from .daytime import DayTime
from .errors import (
    ChunkPrefixNotSetError,
    InvalidSchemaVersionError,
    InvalidTablePeriodError,
    RowShardsRequiredError,
    SchemaVersionParseError,
)
from .periodic_table import PeriodicTableConfig

# Object stores that keep chunks in tables and so need a chunk table prefix.
CHUNK_PREFIX_REQUIRED_STORES = frozenset({
    "aws-dynamo",
    "cassandra",
    "bigtable",
    "bigtable-hashed",
    "gcp",
    "gcp-columnkey",
    "grpc-store",
})

MIN_SCHEMA_VERSION = 1
MAX_SCHEMA_VERSION = 12
# First version with row sharding and day-aligned table periods.
SHARDED_SCHEMA_VERSION = 10
# Versions before this bucket the index by hour.
DAILY_BUCKET_SCHEMA_VERSION = 3

DEFAULT_ROW_SHARDS = 16

_SCHEMA_RE = re.compile(r"^v([0-9]+)$")
_DAY = timedelta(hours=24)


@dataclass(frozen=True)
class PeriodConfig:
    """One schema generation, active from `from_` until the next one starts."""
    from_: DayTime = DayTime(0)
    index_type: str = ""
    object_type: str = ""
    schema: str = ""
    index_tables: PeriodicTableConfig = field(default_factory=PeriodicTableConfig)
    chunk_tables: PeriodicTableConfig = field(default_factory=PeriodicTableConfig)
    row_shards: int = 0

    @cached_property
    def schema_int(self) -> int:
        # Stored in the instance __dict__, outside the dataclass fields, so
        # equality and dataclasses.replace never see it.
        match = _SCHEMA_RE.match(self.schema or "")
        if not match:
            raise SchemaVersionParseError(self.schema)
        return int(match.group(1))

    def version_as_int(self) -> int:
        """Integer part of the schema version, e.g. 11 for "v11".

        Raises:
            SchemaVersionParseError: If the schema is not "v" followed by digits
        """
        return self.schema_int

    @property
    def object_store(self) -> str:
        """Store holding the chunks; falls back to the index store."""
        return self.object_type or self.index_type

    def with_defaults(self) -> "PeriodConfig":
        """Return this period with an unset row shard factor defaulted.

        Only sharded schemas get a default; an unparseable schema is left
        alone for validate() to report.
        """
        try:
            version = self.version_as_int()
        except SchemaVersionParseError:
            return self
        if version >= SHARDED_SCHEMA_VERSION and self.row_shards == 0:
            return dataclasses.replace(self, row_shards=DEFAULT_ROW_SHARDS)
        return self

    def validate(self) -> None:
        """Check this period is internally consistent.

        Raises:
            ChunkPrefixNotSetError: If the object store needs a chunk prefix
            SchemaVersionParseError: If the schema string is malformed
            InvalidSchemaVersionError: If the schema version is unknown
            InvalidTablePeriodError: If a v10+ table period is not whole days
            RowShardsRequiredError: If a v10+ period has no row shards
        """
        if self.object_store in CHUNK_PREFIX_REQUIRED_STORES and not self.chunk_tables.prefix:
            raise ChunkPrefixNotSetError(self.object_store)

        version = self.version_as_int()
        if not MIN_SCHEMA_VERSION <= version <= MAX_SCHEMA_VERSION:
            raise InvalidSchemaVersionError(self.schema)

        # Legacy schemas are unsharded and not day-aligned.
        if version < SHARDED_SCHEMA_VERSION:
            return

        for tables in (self.index_tables, self.chunk_tables):
            if tables.period % _DAY:
                raise InvalidTablePeriodError()

        if self.row_shards <= 0:
            raise RowShardsRequiredError(self.row_shards, self.schema)

    def daily_buckets(self, from_time, through_time, user_id: str) -> List[Bucket]:
        """Day buckets of [from_time, through_time) in this period's index tables."""
        return daily_buckets(self.index_tables, from_time, through_time, user_id)

    def hourly_buckets(self, from_time, through_time, user_id: str) -> List[Bucket]:
        """Hour buckets of [from_time, through_time) in this period's index tables."""
        return hourly_buckets(self.index_tables, from_time, through_time, user_id)

    def index_buckets(self, from_time, through_time, user_id: str) -> List[Bucket]:
        """Buckets at the granularity this period's schema version uses."""
        if self.version_as_int() < DAILY_BUCKET_SCHEMA_VERSION:
            return self.hourly_buckets(from_time, through_time, user_id)
        return self.daily_buckets(from_time, through_time, user_id)

    def index_table_for(self, t) -> str:
        return self.index_tables.table_for(t)

    def chunk_table_for(self, t) -> str:
        return self.chunk_tables.table_for(t)
