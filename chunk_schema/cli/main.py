"""
CLI interface for chunk_schema.

Validates schema configuration files and shows the tables and buckets
they resolve to.
"""

import logging
import sys

import typer
import yaml
from rich.console import Console
from rich.table import Table

from chunk_schema.config.loader import load_schema_config
from chunk_schema.core.daytime import from_millis, parse_timestamp
from chunk_schema.core.errors import PeriodNotFoundError
from chunk_schema.core.schema import SchemaConfig
from chunk_schema.logging_config import setup_logging

app = typer.Typer()
console = Console()

EXIT_CODE_OK = 0
EXIT_CODE_FAIL = 1


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Schema and table addressing for chunk storage."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING)
    if ctx.invoked_subcommand is None:
        console.print("chunk-schema - Use --help to see available commands")


def _load_or_exit(path: str) -> SchemaConfig:
    try:
        return load_schema_config(path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Invalid schema config:[/] {e}")
        sys.exit(EXIT_CODE_FAIL)


def _parse_time_or_exit(value: str) -> int:
    try:
        return parse_timestamp(value)
    except ValueError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(EXIT_CODE_FAIL)


def _format_time(ms: int) -> str:
    return from_millis(ms).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def _check_range_or_exit(start: int, end: int) -> None:
    if start > end:
        console.print(f"[red]Error:[/] range start {_format_time(start)} is after its end {_format_time(end)}")
        sys.exit(EXIT_CODE_FAIL)


@app.command()
def validate(path: str = typer.Argument(..., help="Schema config YAML file")):
    """Load and validate a schema configuration."""
    schema = _load_or_exit(path)

    table = Table(title="Schema periods")
    table.add_column("From")
    table.add_column("Schema")
    table.add_column("Store")
    table.add_column("Object store")
    table.add_column("Index prefix")
    table.add_column("Chunk prefix")
    table.add_column("Row shards", justify="right")
    for period in schema.configs:
        table.add_row(
            str(period.from_),
            period.schema,
            period.index_type,
            period.object_type,
            period.index_tables.prefix,
            period.chunk_tables.prefix,
            str(period.row_shards),
        )
    console.print(table)
    console.print(f"[green]✓[/] {path} is valid ({len(schema.configs)} period(s))")
    sys.exit(EXIT_CODE_OK)


@app.command("chunk-table")
def chunk_table(
    path: str = typer.Argument(..., help="Schema config YAML file"),
    timestamp: str = typer.Argument(..., help="ISO-8601 date or datetime (UTC if no offset)"),
):
    """Print the chunk table used at a point in time."""
    schema = _load_or_exit(path)
    t = _parse_time_or_exit(timestamp)
    try:
        console.print(schema.chunk_table_for(t))
    except PeriodNotFoundError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(EXIT_CODE_FAIL)
    sys.exit(EXIT_CODE_OK)


@app.command()
def buckets(
    path: str = typer.Argument(..., help="Schema config YAML file"),
    from_time: str = typer.Argument(..., metavar="FROM", help="Range start"),
    through_time: str = typer.Argument(..., metavar="THROUGH", help="Range end (exclusive)"),
    user: str = typer.Option(..., "--user", "-u", help="Tenant ID"),
):
    """Print the daily index buckets a range is split into."""
    schema = _load_or_exit(path)
    start = _parse_time_or_exit(from_time)
    end = _parse_time_or_exit(through_time)
    _check_range_or_exit(start, end)

    segments = schema.split_by_period_exclusive(start, end)
    if not segments:
        console.print(f"[red]Error:[/] {PeriodNotFoundError(start)}")
        sys.exit(EXIT_CODE_FAIL)

    table = Table(title=f"Index buckets for {user}")
    table.add_column("Schema")
    table.add_column("Table")
    table.add_column("Hash key")
    table.add_column("From (ms)", justify="right")
    table.add_column("Through (ms)", justify="right")
    for segment_from, segment_through, period in segments:
        for bucket in period.daily_buckets(segment_from, segment_through, user):
            table.add_row(
                period.schema,
                bucket.table_name,
                bucket.hash_key,
                str(bucket.relative_from),
                str(bucket.relative_through),
            )
    console.print(table)
    sys.exit(EXIT_CODE_OK)


@app.command()
def tables(
    path: str = typer.Argument(..., help="Schema config YAML file"),
    from_time: str = typer.Argument(..., metavar="FROM", help="Range start"),
    through_time: str = typer.Argument(..., metavar="THROUGH", help="Range end"),
):
    """Print every index and chunk table a range touches."""
    schema = _load_or_exit(path)
    start = _parse_time_or_exit(from_time)
    end = _parse_time_or_exit(through_time)
    _check_range_or_exit(start, end)

    table = Table(title="Tables")
    table.add_column("Kind")
    table.add_column("Name")
    table.add_column("From")
    table.add_column("Tags")
    for segment_from, segment_through, period in schema.split_by_period(start, end):
        for kind, family in (("index", period.index_tables), ("chunks", period.chunk_tables)):
            for desc in family.periodic_tables(segment_from, segment_through):
                tags = ", ".join(f"{k}={v}" for k, v in sorted(desc.tags.items()))
                table.add_row(kind, desc.name, _format_time(segment_from), tags)
    console.print(table)
    sys.exit(EXIT_CODE_OK)


if __name__ == "__main__":
    app()
