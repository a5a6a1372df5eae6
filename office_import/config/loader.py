from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError as SchemaValidationError

from ..models.config_models import (
    DEFAULT_NULL_SENTINELS,
    DEFAULT_TEMPLATE_CODES,
    AppConfig,
    DatabaseConfig,
    ImportSettings,
    TableConfig,
)

"""Config loader.

Responsibilities:
- Load YAML config/import.yml
- Validate against the packaged JSON schema (config_schema.json)
- Apply defaults for every optional key
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or unreadable, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except SchemaValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _upper_set(values: list[str] | None, default: frozenset[str]) -> frozenset[str]:
    if values is None:
        return default
    return frozenset(v.strip().upper() for v in values)


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    tables_raw = data.get("tables") or {}
    tables = TableConfig(**tables_raw)
    template_codes = data.get("template_codes")
    settings = ImportSettings(
        country_id=data.get("country_id", 1),
        skip_rows=data.get("skip_rows", 1),
        row_offset=data.get("row_offset"),
        null_sentinels=_upper_set(data.get("null_sentinels"), DEFAULT_NULL_SENTINELS),
        # template codes are compared verbatim (not upper-cased)
        template_codes=(
            frozenset(template_codes) if template_codes is not None else DEFAULT_TEMPLATE_CODES
        ),
        office_table=tables.office,
    )
    return AppConfig(database=db, settings=settings, tables=tables)
