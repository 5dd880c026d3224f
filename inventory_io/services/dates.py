from __future__ import annotations

import re

"""Date normalization for imported ``last_seen`` values."""

__all__ = [
    "to_iso_date",
]

_ISO_DATE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
_SHORT_DMY = re.compile(r"^([0-9]{2})-([0-9]{2})-([0-9]{2})$")


def to_iso_date(value: str | None) -> str | None:
    """Normalize a date string to ``YYYY-MM-DD``.

    - ``YYYY-MM-DD`` is returned unchanged (no calendar check)
    - ``DD-MM-YY`` becomes ``20YY-MM-DD``
    - anything else, including empty input, yields None
    """
    if not value:
        return None
    s = value.strip()
    if _ISO_DATE.match(s):
        return s
    m = _SHORT_DMY.match(s)
    if m:
        dd, mm, yy = m.groups()
        return f"20{yy}-{mm}-{dd}"
    return None
