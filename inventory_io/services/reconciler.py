from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from ..models.department import Department
from ..models.device import DeviceRecord, DeviceStatus
from ..models.import_result import ReconcileOutcome, SkippedRow
from ..models.parsed_table import ParsedTable
from .dates import to_iso_date
from .departments import DEFAULT_RESOLVERS, DepartmentLookup, DepartmentResolver, resolve_department

"""Import reconciliation: parsed CSV rows -> DeviceRecord upsert batch.

Policies:
- department references and dates that cannot be resolved become None
  instead of failing the row
- rows without asset tag or serial number are skipped
- a batch with no valid rows is rejected before anything is written
"""

__all__ = [
    "ASSET_TAG_COLUMNS",
    "SERIAL_NO_COLUMNS",
    "ImportValidationError",
    "NO_VALID_ROWS_MESSAGE",
    "map_row",
    "reconcile_rows",
    "build_import_batch",
]

logger = logging.getLogger(__name__)

# Accepted header spellings, in priority order
ASSET_TAG_COLUMNS: tuple[str, ...] = ("asset_tag", "Asset Tag", "asset")
SERIAL_NO_COLUMNS: tuple[str, ...] = ("serial_no", "Serial", "serial")

NO_VALID_ROWS_MESSAGE = "no valid rows: each row requires asset tag and serial number"


class ImportValidationError(Exception):
    """Raised when an import batch has no persistable rows."""


def _first_value(row: Mapping[str, str], columns: Sequence[str]) -> str:
    for column in columns:
        value = row.get(column)
        if value:
            return value
    return ""


def _optional(row: Mapping[str, str], column: str) -> str | None:
    return row.get(column) or None


def _status(row: Mapping[str, str]) -> str:
    return (row.get("status") or DeviceStatus.ACTIVE.value).lower()


def map_row(
    row: Mapping[str, str],
    lookup: DepartmentLookup,
    resolvers: Sequence[DepartmentResolver] = DEFAULT_RESOLVERS,
) -> DeviceRecord:
    """Map one parsed row to a DeviceRecord (which may not be persistable)."""
    return DeviceRecord(
        asset_tag=_first_value(row, ASSET_TAG_COLUMNS),
        serial_no=_first_value(row, SERIAL_NO_COLUMNS),
        status=_status(row),
        model=_optional(row, "model"),
        brand=_optional(row, "brand"),
        department_id=resolve_department(row, lookup, resolvers),
        last_seen=to_iso_date(row.get("last_seen")),
    )


def _skip_reason(record: DeviceRecord) -> str:
    missing = []
    if not record.asset_tag:
        missing.append("asset tag")
    if not record.serial_no:
        missing.append("serial number")
    return "missing " + " and ".join(missing)


def reconcile_rows(
    rows: Iterable[Mapping[str, str]],
    departments: Iterable[Department],
    resolvers: Sequence[DepartmentResolver] = DEFAULT_RESOLVERS,
) -> ReconcileOutcome:
    """Map every row, splitting persistable records from skipped rows.

    Row order is preserved in both lists.
    """
    lookup = DepartmentLookup.build(departments)
    known_statuses = DeviceStatus.values()
    records: list[DeviceRecord] = []
    skipped: list[SkippedRow] = []
    for number, row in enumerate(rows, start=1):
        record = map_row(row, lookup, resolvers)
        if not record.is_persistable:
            skipped.append(SkippedRow(row_number=number, reason=_skip_reason(record), values=dict(row)))
            continue
        if record.status not in known_statuses:
            logger.warning(f"row {number}: unknown status '{record.status}' for {record.asset_tag}")
        records.append(record)
    logger.debug(f"reconciled {len(records)} rows, skipped {len(skipped)}")
    return ReconcileOutcome(records=records, skipped=skipped)


def build_import_batch(
    table: ParsedTable,
    departments: Iterable[Department],
    resolvers: Sequence[DepartmentResolver] = DEFAULT_RESOLVERS,
) -> ReconcileOutcome:
    """Reconcile a parsed table, rejecting it when no row is persistable.

    Raises:
        ImportValidationError: every row lacks asset tag or serial number
    """
    outcome = reconcile_rows(table.rows, departments, resolvers)
    if not outcome.records:
        raise ImportValidationError(NO_VALID_ROWS_MESSAGE)
    return outcome
