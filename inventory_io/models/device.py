from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

"""Device domain models for the inventory import/export tool.

DeviceRecord is the import/export shape handed to the upsert. Device is a row
as stored in the devices table (surrogate id, soft-delete timestamp).
"""

__all__ = [
    "DeviceStatus",
    "DeviceRecord",
    "Device",
    "UPSERT_COLUMNS",
]


class DeviceStatus(Enum):
    """Known device lifecycle states.

    - ACTIVE: in service (default for imports without a status)
    - IN_REPAIR: temporarily out of service
    - RETIRED: decommissioned
    - LOST: missing
    """
    ACTIVE = "active"
    IN_REPAIR = "in_repair"
    RETIRED = "retired"
    LOST = "lost"

    @classmethod
    def values(cls) -> set[str]:
        return {s.value for s in cls}


# Column order used for INSERT ... ON CONFLICT (asset_tag)
UPSERT_COLUMNS: tuple[str, ...] = (
    "asset_tag",
    "serial_no",
    "status",
    "model",
    "brand",
    "department_id",
    "last_seen",
)


@dataclass(frozen=True)
class DeviceRecord:
    """One device ready to be written, keyed by asset_tag.

    status is kept as the raw lower-cased string so that values outside
    DeviceStatus reach the database unchanged (the table constraint decides).
    """
    asset_tag: str
    serial_no: str
    status: str = DeviceStatus.ACTIVE.value
    model: str | None = None
    brand: str | None = None
    department_id: int | None = None
    last_seen: str | None = None  # YYYY-MM-DD

    @property
    def is_persistable(self) -> bool:
        return bool(self.asset_tag) and bool(self.serial_no)

    def to_row(self) -> tuple[Any, ...]:
        """Values in UPSERT_COLUMNS order."""
        return tuple(getattr(self, c) for c in UPSERT_COLUMNS)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Device:
    """A stored device row (devices table)."""
    id: Any  # surrogate key (uuid or serial, depending on the schema)
    asset_tag: str
    serial_no: str
    status: str
    model: str | None = None
    brand: str | None = None
    department_id: int | None = None
    last_seen: date | datetime | str | None = None
    device_type_id: int | None = None
    deleted_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Device:
        return cls(
            id=row.get("id"),
            asset_tag=row.get("asset_tag") or "",
            serial_no=row.get("serial_no") or "",
            status=row.get("status") or DeviceStatus.ACTIVE.value,
            model=row.get("model"),
            brand=row.get("brand"),
            department_id=row.get("department_id"),
            last_seen=row.get("last_seen"),
            device_type_id=row.get("device_type_id"),
            deleted_at=row.get("deleted_at"),
        )
