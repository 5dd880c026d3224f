from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import DatabaseConfig, InventoryConfig, LabelConfig, TableConfig

"""Config loader.

Responsibilities:
- Load YAML config/inventory.yml
- Validate against config_schema.json (shipped next to this module)
- Apply defaults for every optional section
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/inventory.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails validation (missing keys, wrong types, unknown keys).
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


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> InventoryConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    db_raw = data.get("database") or {}
    tables_raw = data.get("tables") or {}
    labels_raw = data.get("labels") or {}
    export_raw = data.get("export") or {}

    tables_default = TableConfig()
    labels_default = LabelConfig()
    return InventoryConfig(
        database=DatabaseConfig(
            host=db_raw.get("host"),
            port=db_raw.get("port"),
            user=db_raw.get("user"),
            password=db_raw.get("password"),
            database=db_raw.get("database"),
            dsn=db_raw.get("dsn"),
        ),
        tables=TableConfig(
            devices=tables_raw.get("devices", tables_default.devices),
            departments=tables_raw.get("departments", tables_default.departments),
        ),
        labels=LabelConfig(
            box_size=labels_raw.get("box_size", labels_default.box_size),
            border=labels_raw.get("border", labels_default.border),
            columns=labels_raw.get("columns", labels_default.columns),
        ),
        export_filename=export_raw.get("filename", "devices.csv"),
        error_log_dir=data.get("error_log_dir", "./logs"),
    )
