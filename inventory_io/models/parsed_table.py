from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd

"""ParsedTable model: the output of the CSV parser.

Every row mapping carries exactly the keys in ``headers``; blank rows have
already been dropped by the parser.
"""

__all__ = [
    "ParsedTable",
]


@dataclass
class ParsedTable:
    headers: list[str] = field(default_factory=list)
    rows: list[dict[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.headers

    def to_frame(self) -> pd.DataFrame:
        """Return the rows as a string-typed DataFrame (preview / inspection).

        Duplicate header names collapse to the last value, matching the row
        mappings themselves.
        """
        columns = list(dict.fromkeys(self.headers))
        return pd.DataFrame(self.rows, columns=columns, dtype="string")
