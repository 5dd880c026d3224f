from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from inventory_io.models.device import DeviceRecord
from inventory_io.services.devices import DeviceValidationError, build_device_record, save_device


def test_build_record_requires_asset_tag_and_serial():
    with pytest.raises(DeviceValidationError):
        build_device_record("A1", "  ")
    with pytest.raises(DeviceValidationError):
        build_device_record(None, "S1")


def test_build_record_defaults_and_blanks():
    record = build_device_record(" A1 ", "S1", status=None, model="", brand="  Dell ")
    assert record == DeviceRecord(asset_tag="A1", serial_no="S1", status="active", model=None, brand="Dell")


def test_build_record_rejects_unknown_status():
    with pytest.raises(DeviceValidationError, match="unknown status"):
        build_device_record("A1", "S1", status="broken")


def test_save_device_creates_without_id():
    store = MagicMock()
    store.create_device.return_value = 11
    record = DeviceRecord("A1", "S1")
    assert save_device(store, record) == 11
    store.create_device.assert_called_once_with(record)
    store.update_device.assert_not_called()


def test_save_device_updates_with_id():
    store = MagicMock()
    store.update_device.return_value = 1
    record = DeviceRecord("A1", "S1", status="in_repair")
    assert save_device(store, record, device_id="u1") == "u1"
    store.update_device.assert_called_once_with("u1", record)


def test_save_device_update_missing_row():
    store = MagicMock()
    store.update_device.return_value = 0
    with pytest.raises(DeviceValidationError, match="device not found"):
        save_device(store, DeviceRecord("A1", "S1"), device_id="nope")
