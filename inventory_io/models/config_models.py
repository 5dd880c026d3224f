from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the inventory tool.

Populated by inventory_io.config.loader from config/inventory.yml.
"""


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class TableConfig:
    """Table names in the external database (plain identifiers)."""
    devices: str = "devices"
    departments: str = "departments"


@dataclass(frozen=True)
class LabelConfig:
    """QR label sheet layout."""
    box_size: int = 8  # pixels per QR module
    border: int = 1  # quiet zone in modules
    columns: int = 3  # labels per row on the printed page


@dataclass(frozen=True)
class InventoryConfig:
    """Root configuration object."""
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    tables: TableConfig = field(default_factory=TableConfig)
    labels: LabelConfig = field(default_factory=LabelConfig)
    export_filename: str = "devices.csv"
    error_log_dir: str = "./logs"
