from __future__ import annotations

import logging
from typing import Any

from ..db.store import DeviceStore
from ..models.device import DeviceRecord, DeviceStatus

"""Single-device create / edit."""

__all__ = [
    "DeviceValidationError",
    "build_device_record",
    "save_device",
]

logger = logging.getLogger(__name__)


class DeviceValidationError(Exception):
    pass


def build_device_record(
    asset_tag: str | None,
    serial_no: str | None,
    status: str | None = None,
    model: str | None = None,
    brand: str | None = None,
    department_id: int | None = None,
) -> DeviceRecord:
    """Build a record from form-style input; blank optional text becomes None."""
    asset_tag = (asset_tag or "").strip()
    serial_no = (serial_no or "").strip()
    if not asset_tag or not serial_no:
        raise DeviceValidationError("asset tag and serial number are required")
    status = (status or DeviceStatus.ACTIVE.value).strip().lower()
    if status not in DeviceStatus.values():
        raise DeviceValidationError(f"unknown status: {status}")
    return DeviceRecord(
        asset_tag=asset_tag,
        serial_no=serial_no,
        status=status,
        model=(model or "").strip() or None,
        brand=(brand or "").strip() or None,
        department_id=department_id,
    )


def save_device(store: DeviceStore, record: DeviceRecord, device_id: Any = None) -> Any:
    """Create the device, or update it when ``device_id`` is given.

    Returns the device id.
    """
    if device_id is None:
        new_id = store.create_device(record)
        logger.info(f"added device {record.asset_tag}")
        return new_id
    updated = store.update_device(device_id, record)
    if not updated:
        raise DeviceValidationError(f"device not found: {device_id}")
    logger.info(f"updated device {record.asset_tag}")
    return device_id
