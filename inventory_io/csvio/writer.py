from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from ..models.department import Department
from ..models.device import Device

"""CSV export of device rows.

Fixed 7-column layout. A field is quoted only when it contains a comma, a
double quote or a line break, so the output re-parses with
inventory_io.csvio.parser to the original values.
"""

__all__ = [
    "EXPORT_COLUMNS",
    "csv_escape",
    "serialize_devices",
    "write_devices_csv",
]

EXPORT_COLUMNS: tuple[str, ...] = (
    "asset_tag",
    "serial_no",
    "status",
    "model",
    "brand",
    "department",
    "last_seen",
)

_NEEDS_QUOTING = (",", '"', "\n", "\r")


def csv_escape(value: Any) -> str:
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        s = value.isoformat()
    else:
        s = str(value)
    if any(ch in s for ch in _NEEDS_QUOTING):
        return '"' + s.replace('"', '""') + '"'
    return s


def _department_names(departments: Iterable[Department] | Mapping[int, str]) -> dict[int, str]:
    if isinstance(departments, Mapping):
        return dict(departments)
    return {d.id: d.name for d in departments}


def serialize_devices(
    devices: Iterable[Device],
    departments: Iterable[Department] | Mapping[int, str] = (),
) -> str:
    """Serialize devices to CSV text: header row first, rows joined by ``\\n``.

    ``department`` is the display name of ``department_id``; unknown or
    missing references export as an empty field.
    """
    names = _department_names(departments)
    lines = [",".join(EXPORT_COLUMNS)]
    for d in devices:
        department = names.get(d.department_id, "") if d.department_id else ""
        lines.append(
            ",".join(
                csv_escape(v)
                for v in (
                    d.asset_tag,
                    d.serial_no,
                    d.status,
                    d.model,
                    d.brand,
                    department,
                    d.last_seen,
                )
            )
        )
    return "\n".join(lines)


def write_devices_csv(
    path: Path,
    devices: Iterable[Device],
    departments: Iterable[Department] | Mapping[int, str] = (),
) -> int:
    """Write the export file (UTF-8). Returns the number of device rows written."""
    device_list = list(devices)
    path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" keeps embedded line breaks untranslated
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(serialize_devices(device_list, departments))
    return len(device_list)
