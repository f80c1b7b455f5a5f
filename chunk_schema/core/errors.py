"""
Error types for schema configuration and lookups.

Configuration-shape errors are fatal at startup; lookup errors are
returned to the caller, who decides whether the request can proceed.
"""


class SchemaConfigError(ValueError):
    """Base class for invalid schema configurations."""


class InvalidSchemaVersionError(SchemaConfigError):
    """Raised when a period names a schema version that does not exist."""

    def __init__(self, schema: str, message: str = "invalid schema version"):
        super().__init__(f"{message}: {schema!r}")
        self.schema = schema


class SchemaVersionParseError(InvalidSchemaVersionError):
    """Raised when a schema string is not of the form 'v<N>'."""

    def __init__(self, schema: str):
        super().__init__(schema, "cannot parse schema version")


class InvalidTablePeriodError(SchemaConfigError):
    """Raised when a table period is not a multiple of 24h."""

    def __init__(self):
        super().__init__("the table period must be a multiple of 24h")


class RowShardsRequiredError(SchemaConfigError):
    """Raised when a sharded schema has no row shard factor."""

    def __init__(self, row_shards: int, schema: str):
        super().__init__(
            f"must have row_shards > 0 (current: {row_shards}) for schema ({schema})"
        )
        self.row_shards = row_shards
        self.schema = schema


class ChunkPrefixNotSetError(SchemaConfigError):
    """Raised when a backend needs a chunk table prefix and none is set."""

    def __init__(self, object_store: str):
        super().__init__(
            f"schema config for chunks is missing the 'prefix' setting "
            f"(required by object store {object_store!r})"
        )
        self.object_store = object_store


class IncreasingFromTimeError(SchemaConfigError):
    """Raised when period start times are not strictly increasing."""

    def __init__(self):
        super().__init__("from time in schemas must be distinct and in increasing order")


class PeriodNotFoundError(LookupError):
    """Raised when no configured period is active at a timestamp."""

    def __init__(self, timestamp: int):
        super().__init__(f"no schema period found for time {timestamp}")
        self.timestamp = timestamp


class DurationParseError(ValueError):
    """Raised when a compact duration string cannot be parsed."""
