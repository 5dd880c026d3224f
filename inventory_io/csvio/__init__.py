"""CSV parsing and export."""

from .parser import parse_csv, read_csv_file
from .writer import EXPORT_COLUMNS, csv_escape, serialize_devices, write_devices_csv

__all__ = [
    "EXPORT_COLUMNS",
    "csv_escape",
    "parse_csv",
    "read_csv_file",
    "serialize_devices",
    "write_devices_csv",
]
