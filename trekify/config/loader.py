from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import CacheConfig, DatabaseConfig, TrekifyConfig

"""Config loader.

Responsibilities:
- Load the YAML config (default config/trekify.yml)
- Validate it against config_schema.json shipped next to this module
- Apply defaults (duplicate_headers=last, cache.reload_on_change=true, table=treks)

Environment variable overrides are applied by the CLI, not here.
"""

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "ConfigError",
    "config_from_mapping",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/trekify.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or not valid JSON, or the data
            violates the schema (missing keys, wrong types, unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def config_from_mapping(data: dict[str, Any]) -> TrekifyConfig:
    """Build a TrekifyConfig from an already validated mapping."""
    cache_raw = data.get("cache") or {}
    db_raw = data.get("database") or {}
    cache = CacheConfig(
        max_age_seconds=cache_raw.get("max_age_seconds"),
        reload_on_change=cache_raw.get("reload_on_change", True),
    )
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
        table=db_raw.get("table", "treks"),
    )
    return TrekifyConfig(
        source_path=data["source_path"],
        duplicate_headers=data.get("duplicate_headers", "last"),
        cache=cache,
        database=db,
    )


def load_config(path: Path) -> TrekifyConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)
    return config_from_mapping(data)
