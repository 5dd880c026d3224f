from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass

from ..models.department import Department

"""Department reference resolution for imported rows.

A CSV row may point at its department in several ways. Resolution runs an
ordered chain of resolver functions and stops at the first one returning an
id:

1. ``department`` column holding a department name (case-insensitive)
2. ``department_id`` column holding a known numeric id
3. ``department_id`` column holding a department code
4. ``department_id`` column holding a department name (case-insensitive)

No match resolves to None; the row is still imported.
"""

__all__ = [
    "DepartmentLookup",
    "DepartmentResolver",
    "DEFAULT_RESOLVERS",
    "resolve_department",
    "by_department_name",
    "by_department_id_number",
    "by_department_id_code",
    "by_department_id_name",
]

DEPARTMENT_NAME_COLUMN = "department"
DEPARTMENT_ID_COLUMN = "department_id"

# ASCII decimal or exponent notation only; float() alone also takes "1_0" and non-ASCII digits
NUMERIC_RE = re.compile(r"^[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?$")


def _name_key(value: str) -> str:
    return value.strip().lower()


@dataclass(frozen=True)
class DepartmentLookup:
    """Lookup tables derived from one department snapshot.

    Built per import and discarded afterwards. When two departments share a
    name or code, the later one in the snapshot wins.
    """
    by_name: dict[str, int]
    by_code: dict[str, int]
    ids: frozenset[int]

    @classmethod
    def build(cls, departments: Iterable[Department]) -> DepartmentLookup:
        by_name: dict[str, int] = {}
        by_code: dict[str, int] = {}
        ids: set[int] = set()
        for d in departments:
            by_name[_name_key(str(d.name))] = d.id
            code = str(d.code or "").strip()
            if code:
                by_code[code] = d.id
            ids.add(d.id)
        return cls(by_name=by_name, by_code=by_code, ids=frozenset(ids))


DepartmentResolver = Callable[[Mapping[str, str], DepartmentLookup], int | None]


def _as_number(raw: str) -> float | None:
    if not NUMERIC_RE.match(raw):
        return None
    try:
        num = float(raw)
    except ValueError:
        return None
    if math.isnan(num) or math.isinf(num):
        return None
    return num


def by_department_name(row: Mapping[str, str], lookup: DepartmentLookup) -> int | None:
    name = _name_key(row.get(DEPARTMENT_NAME_COLUMN) or "")
    if not name:
        return None
    return lookup.by_name.get(name)


def by_department_id_number(row: Mapping[str, str], lookup: DepartmentLookup) -> int | None:
    raw = (row.get(DEPARTMENT_ID_COLUMN) or "").strip()
    if not raw:
        return None
    num = _as_number(raw)
    if num is None or not num.is_integer():
        return None
    candidate = int(num)
    return candidate if candidate in lookup.ids else None


def by_department_id_code(row: Mapping[str, str], lookup: DepartmentLookup) -> int | None:
    raw = (row.get(DEPARTMENT_ID_COLUMN) or "").strip()
    if not raw:
        return None
    return lookup.by_code.get(raw)


def by_department_id_name(row: Mapping[str, str], lookup: DepartmentLookup) -> int | None:
    raw = _name_key(row.get(DEPARTMENT_ID_COLUMN) or "")
    if not raw:
        return None
    return lookup.by_name.get(raw)


DEFAULT_RESOLVERS: tuple[DepartmentResolver, ...] = (
    by_department_name,
    by_department_id_number,
    by_department_id_code,
    by_department_id_name,
)


def resolve_department(
    row: Mapping[str, str],
    lookup: DepartmentLookup,
    resolvers: Sequence[DepartmentResolver] = DEFAULT_RESOLVERS,
) -> int | None:
    for resolver in resolvers:
        department_id = resolver(row, lookup)
        if department_id is not None:
            return department_id
    return None
