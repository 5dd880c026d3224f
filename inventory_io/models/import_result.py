from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .device import DeviceRecord

"""Result models for import reconciliation and the import operation."""

__all__ = [
    "SkippedRow",
    "ReconcileOutcome",
    "ImportResult",
]


@dataclass(frozen=True)
class SkippedRow:
    """A parsed row excluded from the upsert batch."""
    row_number: int  # 1-based among parsed data rows
    reason: str
    values: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ReconcileOutcome:
    records: list[DeviceRecord]
    skipped: list[SkippedRow]

    @property
    def total_rows(self) -> int:
        return len(self.records) + len(self.skipped)


@dataclass(frozen=True)
class ImportResult:
    """Aggregated result of one CSV import (SUMMARY line source)."""
    source: str  # file name
    parsed_rows: int  # data rows after blank-row filtering
    imported_rows: int  # rows handed to the upsert (0 on dry run)
    skipped_rows: int  # rows without asset tag / serial number
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    dry_run: bool = False
