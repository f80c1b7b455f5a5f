"""
Schema configuration files.
"""

from .loader import dump_schema_config, load_schema_config, parse_schema_config

__all__ = ["dump_schema_config", "load_schema_config", "parse_schema_config"]
