from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from psycopg2.extras import execute_values

from ..models.config_models import TableConfig
from ..models.department import Department
from ..models.device import UPSERT_COLUMNS, Device, DeviceRecord

"""Device store: the PostgreSQL side of the inventory tool.

All statements run on a psycopg2 cursor supplied by the caller; transaction
boundaries (commit / rollback) belong to the connection owner
(inventory_io.cli.__main__._db_connection).

Any driver failure is wrapped in StoreError carrying the driver message.
"""

__all__ = [
    "StoreError",
    "DeviceFilter",
    "UpsertResult",
    "DeviceStore",
]

logger = logging.getLogger(__name__)


class StoreError(Exception):
    pass


@dataclass(frozen=True)
class DeviceFilter:
    """Device list filter. None / empty values do not filter."""
    status: str | None = None
    department_id: int | None = None
    search: str | None = None  # substring of asset_tag, serial_no or model
    ids: Sequence[Any] | None = None


@dataclass(frozen=True)
class UpsertResult:
    upserted_rows: int
    duplicate_keys: int = 0  # asset tags repeated inside the batch (last one wins)


def _rows_as_dicts(cursor: Any) -> list[dict[str, Any]]:
    names = [col[0] for col in cursor.description or ()]
    return [dict(zip(names, r)) for r in cursor.fetchall()]


def _id_texts(ids: Iterable[Any]) -> list[str]:
    # bound as text[]; the id column (serial or uuid) is cast to text to match
    return [str(i).strip() for i in ids]


def _dedupe_by_asset_tag(records: Iterable[DeviceRecord]) -> tuple[list[DeviceRecord], int]:
    # ON CONFLICT DO UPDATE cannot touch the same row twice in one statement
    latest: dict[str, DeviceRecord] = {}
    total = 0
    for r in records:
        latest[r.asset_tag] = r
        total += 1
    return list(latest.values()), total - len(latest)


class DeviceStore:
    """Devices / departments access over a psycopg2 cursor."""

    def __init__(self, cursor: Any, tables: TableConfig | None = None) -> None:
        self.cursor = cursor
        self.tables = tables or TableConfig()

    def _execute(self, sql: str, params: Sequence[Any] | None = None) -> None:
        logger.debug(f"sql: {sql}")
        try:
            self.cursor.execute(sql, params)
        except Exception as e:
            raise StoreError(str(e)) from e

    def fetch_departments(self) -> list[Department]:
        """Department snapshot ordered by name."""
        self._execute(f"SELECT id, name, code FROM {self.tables.departments} ORDER BY name")
        try:
            return [Department.from_row(r) for r in _rows_as_dicts(self.cursor)]
        except Exception as e:
            raise StoreError(f"failed fetching departments: {e}") from e

    def fetch_devices(self, device_filter: DeviceFilter | None = None) -> list[Device]:
        """Non-deleted devices ordered by asset tag."""
        f = device_filter or DeviceFilter()
        clauses = ["deleted_at IS NULL"]
        params: list[Any] = []
        if f.status:
            clauses.append("status = %s")
            params.append(f.status)
        if f.department_id is not None:
            clauses.append("department_id = %s")
            params.append(f.department_id)
        search = (f.search or "").strip()
        if search:
            clauses.append("(asset_tag ILIKE %s OR serial_no ILIKE %s OR model ILIKE %s)")
            pattern = f"%{search}%"
            params.extend([pattern, pattern, pattern])
        if f.ids is not None:
            clauses.append("id::text = ANY(%s)")
            params.append(_id_texts(f.ids))
        sql = (
            f"SELECT * FROM {self.tables.devices} WHERE {' AND '.join(clauses)} "
            "ORDER BY asset_tag"
        )
        self._execute(sql, params)
        try:
            return [Device.from_row(r) for r in _rows_as_dicts(self.cursor)]
        except Exception as e:
            raise StoreError(f"failed fetching devices: {e}") from e

    def upsert_devices(
        self,
        records: Iterable[DeviceRecord],
        page_size: int = 1000,
    ) -> UpsertResult:
        """Insert-or-update keyed by asset_tag. An empty batch executes nothing."""
        batch, duplicates = _dedupe_by_asset_tag(records)
        if not batch:
            return UpsertResult(upserted_rows=0)
        if duplicates:
            logger.info(f"{duplicates} duplicate asset tag(s) in batch, last occurrence wins")

        cols_sql = ",".join(f'"{c}"' for c in UPSERT_COLUMNS)
        updates = ",".join(f'"{c}" = EXCLUDED."{c}"' for c in UPSERT_COLUMNS if c != "asset_tag")
        sql = (
            f"INSERT INTO {self.tables.devices} ({cols_sql}) VALUES %s "
            f'ON CONFLICT ("asset_tag") DO UPDATE SET {updates}'
        )
        rows = [r.to_row() for r in batch]

        try:
            execute_values(self.cursor, sql, rows, page_size=page_size)
        except Exception as e:
            raise StoreError(str(e)) from e
        return UpsertResult(upserted_rows=len(rows), duplicate_keys=duplicates)

    def create_device(self, record: DeviceRecord) -> Any:
        """Insert one device; returns its id."""
        cols_sql = ",".join(f'"{c}"' for c in UPSERT_COLUMNS)
        placeholders = ",".join(["%s"] * len(UPSERT_COLUMNS))
        self._execute(
            f"INSERT INTO {self.tables.devices} ({cols_sql}) VALUES ({placeholders}) RETURNING id",
            record.to_row(),
        )
        try:
            row = self.cursor.fetchone()
        except Exception as e:
            raise StoreError(f"failed fetching RETURNING id: {e}") from e
        return row[0] if row else None

    def update_device(self, device_id: Any, record: DeviceRecord) -> int:
        """Update the editable fields of one device; last_seen is left untouched."""
        columns = [c for c in UPSERT_COLUMNS if c != "last_seen"]
        assignments = ",".join(f'"{c}" = %s' for c in columns)
        values = [getattr(record, c) for c in columns]
        self._execute(
            f"UPDATE {self.tables.devices} SET {assignments} WHERE id = %s",
            [*values, device_id],
        )
        return self.cursor.rowcount

    def soft_delete_devices(self, device_ids: Sequence[Any]) -> int:
        """Mark devices deleted (deleted_at = now, UTC). Returns affected rows."""
        ids = _id_texts(device_ids)
        if not ids:
            return 0
        self._execute(
            f"UPDATE {self.tables.devices} SET deleted_at = %s WHERE id::text = ANY(%s)",
            [datetime.now(UTC), ids],
        )
        return self.cursor.rowcount
