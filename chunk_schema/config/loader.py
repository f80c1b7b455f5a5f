"""
Schema configuration loading.

Reads a multi-period schema configuration from YAML and writes it back.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict

import yaml

from chunk_schema.core.daytime import DayTime
from chunk_schema.core.duration import format_duration, parse_duration
from chunk_schema.core.errors import DurationParseError
from chunk_schema.core.period import PeriodConfig
from chunk_schema.core.periodic_table import PeriodicTableConfig
from chunk_schema.core.schema import SchemaConfig
from chunk_schema.logging_config import get_logger

logger = get_logger(__name__)

# YAML key -> PeriodConfig field
_PERIOD_KEYS = {
    "from": "from_",
    "store": "index_type",
    "object_store": "object_type",
    "schema": "schema",
    "index": "index_tables",
    "chunks": "chunk_tables",
    "row_shards": "row_shards",
}
_TABLE_KEYS = {"prefix", "period", "tags"}


def load_schema_config(path: str) -> SchemaConfig:
    """Load and validate a schema configuration from a YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated SchemaConfig, with defaults applied

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Schema config file not found: {path}")

    logger.info("Loading schema config from %s", config_path)
    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")

    schema = parse_schema_config(raw_config).validate()
    logger.info("Loaded %d schema period(s) from %s", len(schema.configs), config_path)
    return schema


def parse_schema_config(raw_config: Any) -> SchemaConfig:
    """Build an unvalidated SchemaConfig from already-decoded YAML data.

    Raises:
        ValueError: If the data does not have the expected shape
    """
    if not isinstance(raw_config, dict):
        raise ValueError("Schema config must be a dictionary")

    unknown_keys = set(raw_config.keys()) - {'configs'}
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    configs_data = raw_config.get('configs') or []
    if not isinstance(configs_data, list):
        raise ValueError("'configs' must be a list")

    periods = []
    for i, period_data in enumerate(configs_data):
        periods.append(_parse_period_config(period_data, f"configs[{i}]"))
    return SchemaConfig(tuple(periods))


def _parse_period_config(data: Any, path: str) -> PeriodConfig:
    """Parse one schema period.

    Args:
        data: Period configuration data
        path: Path for error messages

    Returns:
        PeriodConfig, not yet validated
    """
    if not isinstance(data, dict):
        raise ValueError(f"{path} must be a dictionary")

    unknown_keys = set(data.keys()) - set(_PERIOD_KEYS)
    if unknown_keys:
        raise ValueError(f"Unknown keys in {path}: {unknown_keys}")

    if 'from' not in data:
        raise ValueError(f"Missing required 'from' in {path}")
    if 'schema' not in data:
        raise ValueError(f"Missing required 'schema' in {path}")

    schema = data['schema']
    if not isinstance(schema, str):
        raise ValueError(f"'schema' in {path} must be a string")

    row_shards = data.get('row_shards', 0)
    if isinstance(row_shards, bool) or not isinstance(row_shards, int) or row_shards < 0:
        raise ValueError(f"'row_shards' in {path} must be a non-negative integer")

    return PeriodConfig(
        from_=_parse_day_time(data['from'], path),
        index_type=_parse_optional_str(data, 'store', path),
        object_type=_parse_optional_str(data, 'object_store', path),
        schema=schema,
        index_tables=parse_periodic_table_config(data.get('index') or {}, f"{path}.index"),
        chunk_tables=parse_periodic_table_config(data.get('chunks') or {}, f"{path}.chunks"),
        row_shards=row_shards,
    )


def parse_periodic_table_config(data: Any, path: str = "table") -> PeriodicTableConfig:
    """Parse a table family section (prefix, period, tags)."""
    if not isinstance(data, dict):
        raise ValueError(f"{path} must be a dictionary")

    unknown_keys = set(data.keys()) - _TABLE_KEYS
    if unknown_keys:
        raise ValueError(f"Unknown keys in {path}: {unknown_keys}")

    period = data.get('period', "0")
    if isinstance(period, bool) or not isinstance(period, (str, int)):
        raise ValueError(f"'period' in {path} must be a duration string such as '1w' or '24h'")
    try:
        period_td = parse_duration(str(period))
    except DurationParseError as e:
        raise ValueError(f"'period' in {path}: {e}")

    tags = data.get('tags') or {}
    if not isinstance(tags, dict):
        raise ValueError(f"'tags' in {path} must be a dictionary")

    return PeriodicTableConfig(
        prefix=_parse_optional_str(data, 'prefix', path),
        period=period_td,
        tags={str(k): str(v) for k, v in tags.items()},
    )


def _parse_day_time(value: Any, path: str) -> DayTime:
    # Unquoted dates come out of YAML as date objects.
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return DayTime.from_datetime(value)
    try:
        return DayTime.parse(value)
    except ValueError as e:
        raise ValueError(f"'from' in {path}: {e}")


def _parse_optional_str(data: Dict, key: str, path: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"'{key}' in {path} must be a string")
    return value


def periodic_table_config_to_dict(cfg: PeriodicTableConfig) -> Dict[str, Any]:
    """Plain-data form of a table family, with the period in compact form."""
    out: Dict[str, Any] = {
        'prefix': cfg.prefix,
        'period': format_duration(cfg.period),
    }
    if cfg.tags:
        out['tags'] = dict(cfg.tags)
    return out


def schema_config_to_dict(schema: SchemaConfig) -> Dict[str, Any]:
    """Plain-data form of a schema configuration, in the file layout."""
    configs = []
    for period in schema.configs:
        configs.append({
            'from': str(period.from_),
            'store': period.index_type,
            'object_store': period.object_type,
            'schema': period.schema,
            'index': periodic_table_config_to_dict(period.index_tables),
            'chunks': periodic_table_config_to_dict(period.chunk_tables),
            'row_shards': period.row_shards,
        })
    return {'configs': configs}


def dump_periodic_table_config(cfg: PeriodicTableConfig) -> str:
    return yaml.safe_dump(periodic_table_config_to_dict(cfg), sort_keys=False)


def dump_schema_config(schema: SchemaConfig) -> str:
    """Serialize a schema configuration to YAML that load_schema_config accepts."""
    return yaml.safe_dump(schema_config_to_dict(schema), sort_keys=False)
