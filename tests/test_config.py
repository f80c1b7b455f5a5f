"""
Unit tests for schema configuration loading.

Tests strict key checking, validation on load and round-tripping
through YAML.
"""

import os
import shutil
import tempfile
from datetime import timedelta

import pytest
import yaml

from chunk_schema.config.loader import (
    dump_periodic_table_config,
    dump_schema_config,
    load_schema_config,
    parse_periodic_table_config,
    parse_schema_config,
)
from chunk_schema.core.daytime import DayTime
from chunk_schema.core.errors import IncreasingFromTimeError, InvalidTablePeriodError
from chunk_schema.core.period import PeriodConfig
from chunk_schema.core.periodic_table import PeriodicTableConfig

LOKI_STYLE_CONFIG = """
configs:
  - from: 2020-07-31
    index:
      period: 24h
      prefix: loki_index_
    object_store: gcs
    schema: v11
    store: boltdb-shipper
"""


class TestConfigLoading:
    """Test configuration loading and validation."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        """Clean up test environment."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_config(self, config_data: dict, filename: str = "schema.yaml") -> str:
        """Write configuration data to temporary file."""
        config_path = os.path.join(self.temp_dir, filename)
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f)
        return config_path

    def _write_text(self, text: str, filename: str = "schema.yaml") -> str:
        config_path = os.path.join(self.temp_dir, filename)
        with open(config_path, 'w', encoding='utf-8') as f:
            f.write(text)
        return config_path

    def test_valid_config_loads_correctly(self):
        """Test that a valid configuration loads and gets defaults applied."""
        config = load_schema_config(self._write_text(LOKI_STYLE_CONFIG))

        assert config.configs == (PeriodConfig(
            from_=DayTime(1596153600000),
            index_type="boltdb-shipper",
            object_type="gcs",
            schema="v11",
            index_tables=PeriodicTableConfig(prefix="loki_index_", period=timedelta(hours=24)),
            row_shards=16,
        ),)
        assert config.configs[0].version_as_int() == 11

    def test_quoted_from_date(self):
        """Test that quoted and unquoted dates give the same start."""
        config_path = self._write_config({
            "configs": [{"from": "2020-07-31", "schema": "v9"}],
        })
        config = load_schema_config(config_path)
        assert config.configs[0].from_ == DayTime.parse("2020-07-31")

    def test_multiple_periods(self):
        config_path = self._write_config({
            "configs": [
                {"from": "2019-01-01", "schema": "v9", "store": "aws-dynamo",
                 "chunks": {"prefix": "chunks_", "period": "1w"}},
                {"from": "2020-01-01", "schema": "v11", "store": "aws-dynamo",
                 "chunks": {"prefix": "chunks_v11_", "period": "1w"},
                 "row_shards": 32},
            ],
        })
        config = load_schema_config(config_path)

        assert [p.schema for p in config.configs] == ["v9", "v11"]
        assert config.configs[1].row_shards == 32
        assert config.chunk_table_for(DayTime.parse("2020-01-01")) == "chunks_v11_2608"

    def test_missing_configs_is_empty_schema(self):
        config = load_schema_config(self._write_config({"configs": []}))
        assert config.configs == ()

    def test_missing_file_raises_error(self):
        """Test that missing config file raises error."""
        with pytest.raises(FileNotFoundError, match="Schema config file not found"):
            load_schema_config("nonexistent.yaml")

    def test_empty_config_raises_error(self):
        """Test that empty config file raises error."""
        config_path = self._write_config({})
        with pytest.raises(ValueError, match="Configuration file is empty"):
            load_schema_config(config_path)

    def test_invalid_yaml_raises_error(self):
        """Test that invalid YAML raises error."""
        config_path = self._write_text("invalid: yaml: content: [")
        with pytest.raises(yaml.YAMLError):
            load_schema_config(config_path)

    def test_unknown_top_level_keys_raise_error(self):
        config_path = self._write_config({"configs": [], "storage": {}})
        with pytest.raises(ValueError, match="Unknown configuration keys"):
            load_schema_config(config_path)

    def test_unknown_period_keys_raise_error(self):
        config_path = self._write_config({
            "configs": [{"from": "2020-01-01", "schema": "v9", "shards": 4}],
        })
        with pytest.raises(ValueError, match=r"Unknown keys in configs\[0\]"):
            load_schema_config(config_path)

    def test_unknown_table_keys_raise_error(self):
        config_path = self._write_config({
            "configs": [{"from": "2020-01-01", "schema": "v9",
                         "index": {"prefix": "i_", "retention": "30d"}}],
        })
        with pytest.raises(ValueError, match=r"Unknown keys in configs\[0\]\.index"):
            load_schema_config(config_path)

    def test_missing_from_raises_error(self):
        config_path = self._write_config({"configs": [{"schema": "v9"}]})
        with pytest.raises(ValueError, match=r"Missing required 'from' in configs\[0\]"):
            load_schema_config(config_path)

    def test_missing_schema_raises_error(self):
        config_path = self._write_config({"configs": [{"from": "2020-01-01"}]})
        with pytest.raises(ValueError, match="Missing required 'schema'"):
            load_schema_config(config_path)

    def test_invalid_from_raises_error(self):
        config_path = self._write_config({"configs": [{"from": "31/07/2020", "schema": "v9"}]})
        with pytest.raises(ValueError, match="'from' in configs"):
            load_schema_config(config_path)

    def test_invalid_period_raises_error(self):
        config_path = self._write_config({
            "configs": [{"from": "2020-01-01", "schema": "v9", "index": {"period": "6x"}}],
        })
        with pytest.raises(ValueError, match=r"'period' in configs\[0\]\.index"):
            load_schema_config(config_path)

    def test_negative_row_shards_raises_error(self):
        config_path = self._write_config({
            "configs": [{"from": "2020-01-01", "schema": "v10", "row_shards": -1}],
        })
        with pytest.raises(ValueError, match="non-negative integer"):
            load_schema_config(config_path)

    def test_validation_errors_propagate(self):
        """Test that loading rejects configurations that fail validation."""
        config_path = self._write_config({
            "configs": [{"from": "2020-01-01", "schema": "v10", "index": {"period": "6h"}}],
        })
        with pytest.raises(InvalidTablePeriodError):
            load_schema_config(config_path)

    def test_out_of_order_periods_raise_error(self):
        config_path = self._write_config({
            "configs": [
                {"from": "2020-01-02", "schema": "v9"},
                {"from": "2020-01-01", "schema": "v9"},
            ],
        })
        with pytest.raises(IncreasingFromTimeError):
            load_schema_config(config_path)

    def test_dump_then_load_round_trips(self):
        """Test that a dumped configuration loads back unchanged."""
        config = load_schema_config(self._write_text(LOKI_STYLE_CONFIG))

        reloaded = load_schema_config(self._write_text(dump_schema_config(config), "dumped.yaml"))

        assert reloaded == config


class TestPeriodicTableConfigYaml:
    """Test the table family section on its own."""

    def test_custom_period_and_tags(self):
        """Test compact periods and tags survive decode and encode."""
        text = "prefix: cortex_\nperiod: 1w\ntags:\n  foo: bar\n"

        cfg = parse_periodic_table_config(yaml.safe_load(text))

        assert cfg == PeriodicTableConfig(
            prefix="cortex_",
            period=timedelta(days=7),
            tags={"foo": "bar"},
        )
        assert dump_periodic_table_config(cfg) == text

    def test_defaults(self):
        assert parse_periodic_table_config({}) == PeriodicTableConfig()

    def test_non_string_tags_are_stringified(self):
        cfg = parse_periodic_table_config({"tags": {"replicas": 3}})
        assert cfg.tags == {"replicas": "3"}

    def test_parse_schema_config_does_not_validate(self):
        """Test parsing alone leaves defaults unapplied."""
        schema = parse_schema_config({"configs": [{"from": "2020-01-01", "schema": "v10"}]})
        assert schema.configs[0].row_shards == 0
