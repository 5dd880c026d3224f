from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""Department reference model (departments table)."""

__all__ = [
    "Department",
]


@dataclass(frozen=True)
class Department:
    id: int
    name: str
    code: str | None = None  # optional short code, e.g. '15'

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Department:
        return cls(id=row["id"], name=str(row.get("name") or ""), code=row.get("code"))
