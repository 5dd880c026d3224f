from __future__ import annotations
import pytest
from pathlib import Path
from inventory_io.config.loader import ConfigError, load_config
from inventory_io.models.config_models import InventoryConfig


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert isinstance(cfg, InventoryConfig)
    assert cfg.database.host == "localhost"
    assert cfg.database.port == 5432
    assert cfg.database.dsn is None
    assert cfg.tables.devices == "devices"
    assert cfg.labels.box_size == 4
    assert cfg.export_filename == "devices.csv"
    assert cfg.error_log_dir == "./logs"


def test_load_config_minimal_applies_defaults(temp_workdir: Path):
    p = temp_workdir / "config" / "inventory.yml"
    p.write_text("database:\n  dsn: postgresql://localhost/inventory\n", encoding="utf-8")
    cfg = load_config(p)
    assert cfg.database.dsn == "postgresql://localhost/inventory"
    assert cfg.tables.departments == "departments"
    assert cfg.labels.columns == 3
    assert cfg.export_filename == "devices.csv"


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "not_exists.yml")


def test_load_config_invalid_yaml(temp_workdir: Path):
    p = temp_workdir / "config" / "inventory.yml"
    p.write_text("database: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(p)


def test_load_config_missing_required(temp_workdir: Path):
    p = temp_workdir / "config" / "inventory.yml"
    p.write_text("export:\n  filename: out.csv\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(p)
    assert "config validation failed" in str(e.value) and "required property" in str(e.value)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_load_config_rejects_unsafe_table_name(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace(
        "  devices: devices", "  devices: devices; DROP TABLE devices"
    )
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_load_config_non_mapping(temp_workdir: Path):
    p = temp_workdir / "config" / "inventory.yml"
    p.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(p)
