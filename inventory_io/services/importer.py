from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..csvio.parser import read_csv_file
from ..csvio.writer import write_devices_csv
from ..db.store import DeviceFilter, DeviceStore
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import ErrorRecord
from ..models.import_result import ImportResult
from .reconciler import build_import_batch

"""Import / export orchestration.

import_devices():
1. Parse the CSV file
2. Fetch the department snapshot
3. Reconcile rows into an upsert batch (empty batch -> ImportValidationError)
4. Record skipped rows in the error log
5. Upsert the batch (skipped on dry run)

Store failures propagate as StoreError; nothing is retried.
"""

__all__ = [
    "import_devices",
    "export_devices",
]

logger = logging.getLogger(__name__)

SKIPPED_ROW_ERROR = "MISSING_REQUIRED_FIELD"


def import_devices(
    source: Path,
    store: DeviceStore,
    *,
    dry_run: bool = False,
    error_log: ErrorLogBuffer | None = None,
) -> ImportResult:
    """Import a device CSV file into the store.

    Args:
        source: CSV file path (UTF-8)
        store: Device store bound to an open cursor
        dry_run: Reconcile and report without writing
        error_log: Buffer receiving one record per skipped row (flushed here)

    Returns:
        ImportResult for the SUMMARY line

    Raises:
        ImportValidationError: No row has both asset tag and serial number
        StoreError: Fetching departments or the upsert failed
        OSError / UnicodeDecodeError: The file cannot be read as UTF-8
    """
    start_time = datetime.now(UTC)
    table = read_csv_file(source)
    logger.info(f"parsed {len(table)} row(s) from {source.name}")

    departments = store.fetch_departments()
    logger.debug(f"department snapshot: {len(departments)} department(s)")

    outcome = build_import_batch(table, departments)

    if error_log is not None and outcome.skipped:
        for skipped in outcome.skipped:
            error_log.append(
                ErrorRecord.create(
                    file=source.name,
                    row=skipped.row_number,
                    error_type=SKIPPED_ROW_ERROR,
                    message=skipped.reason,
                )
            )
        path = error_log.flush()
        logger.warning(f"{len(outcome.skipped)} row(s) skipped, see {path}")

    imported = 0
    if dry_run:
        logger.info(f"dry run: {len(outcome.records)} row(s) not written")
    else:
        result = store.upsert_devices(outcome.records)
        imported = result.upserted_rows

    end_time = datetime.now(UTC)
    return ImportResult(
        source=source.name,
        parsed_rows=len(table),
        imported_rows=imported,
        skipped_rows=len(outcome.skipped),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        dry_run=dry_run,
    )


def export_devices(
    target: Path,
    store: DeviceStore,
    device_filter: DeviceFilter | None = None,
) -> int:
    """Write the (filtered) device list to ``target``; returns the row count."""
    departments = store.fetch_departments()
    devices = store.fetch_devices(device_filter)
    count = write_devices_csv(target, devices, departments)
    logger.info(f"exported {count} device(s) to {target}")
    return count
