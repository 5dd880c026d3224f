"""Domain models for the device inventory import/export tool.

This package contains the model classes shared by the CSV parser, the import
reconciler, the device store and the CLI.
"""

from .config_models import DatabaseConfig, InventoryConfig, LabelConfig, TableConfig
from .department import Department
from .device import Device, DeviceRecord, DeviceStatus
from .error_record import ErrorRecord
from .import_result import ImportResult, ReconcileOutcome, SkippedRow
from .parsed_table import ParsedTable

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "InventoryConfig",
    "LabelConfig",
    "TableConfig",
    # Domain models
    "Department",
    "Device",
    "DeviceRecord",
    "DeviceStatus",
    "ParsedTable",
    # Processing models
    "ErrorRecord",
    "ImportResult",
    "ReconcileOutcome",
    "SkippedRow",
]
