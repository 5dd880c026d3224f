# Shared pytest fixtures
from __future__ import annotations
import logging
import tempfile
from pathlib import Path
from typing import Any

import pytest

from inventory_io.db.store import UpsertResult
from inventory_io.logging.init import APP_LOGGER_NAME, reset_logging
from inventory_io.models.department import Department
from inventory_io.models.device import Device, DeviceRecord


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def clean_logging():
    reset_logging()
    yield
    reset_logging()
    # setup_logging() detaches the app logger from root; undo so caplog sees records
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in app_logger.handlers[:]:
        app_logger.removeHandler(handler)
    app_logger.propagate = True
    app_logger.setLevel(logging.NOTSET)


@pytest.fixture()
def sample_config_yaml() -> str:
    return """database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: inventory
tables:
  devices: devices
  departments: departments
export:
  filename: devices.csv
labels:
  box_size: 4
  border: 1
  columns: 3
error_log_dir: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "inventory.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def departments() -> list[Department]:
    return [
        Department(id=1, name="IT", code="10"),
        Department(id=2, name="Finance", code="FIN"),
        Department(id=3, name="Human Resources", code=None),
    ]


class FakeStore:
    """In-memory stand-in for DeviceStore (same method names)."""

    def __init__(self, departments: list[Department] | None = None, devices: list[Device] | None = None) -> None:
        self.departments = departments or []
        self.devices = devices or []
        self.upsert_calls: list[list[DeviceRecord]] = []
        self.fail_with: Exception | None = None
        self.deleted_ids: list[str] = []

    def fetch_departments(self) -> list[Department]:
        return sorted(self.departments, key=lambda d: d.name)

    def fetch_devices(self, device_filter: Any = None) -> list[Device]:
        return sorted((d for d in self.devices if d.deleted_at is None), key=lambda d: d.asset_tag)

    def upsert_devices(self, records) -> UpsertResult:
        if self.fail_with is not None:
            raise self.fail_with
        batch = list(records)
        self.upsert_calls.append(batch)
        return UpsertResult(upserted_rows=len(batch))

    def create_device(self, record: DeviceRecord) -> int:
        new_id = max((d.id for d in self.devices), default=0) + 1
        self.devices.append(Device.from_row({"id": new_id, **record.to_dict()}))
        return new_id

    def update_device(self, device_id: Any, record: DeviceRecord) -> int:
        for i, d in enumerate(self.devices):
            if str(d.id) == str(device_id):
                self.devices[i] = Device.from_row({"id": d.id, **record.to_dict()})
                return 1
        return 0

    def soft_delete_devices(self, ids) -> int:
        wanted = {str(i) for i in ids}
        self.deleted_ids = sorted(wanted)
        return sum(1 for d in self.devices if str(d.id) in wanted)


@pytest.fixture()
def fake_store(departments: list[Department]) -> FakeStore:
    return FakeStore(departments=departments)


@pytest.fixture()
def write_csv(temp_workdir: Path):
    def _write(name: str, text: str) -> Path:
        p = temp_workdir / "data" / name
        p.write_bytes(text.encode("utf-8"))
        return p
    return _write


@pytest.fixture()
def make_store():
    return FakeStore
