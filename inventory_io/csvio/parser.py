from __future__ import annotations

from pathlib import Path

from ..models.parsed_table import ParsedTable

"""Permissive CSV parser.

Quoting follows RFC 4180 closely enough for spreadsheet exports:

- a double quote toggles the quoted state; inside quotes a doubled quote is
  a literal quote character
- comma ends a field, ``\\n`` / ``\\r`` / ``\\r\\n`` end a row (outside quotes)
- the first row is the header row

Malformed quoting never raises: an unbalanced quote simply swallows the rest
of the input into the current field.
"""

__all__ = [
    "parse_csv",
    "read_csv_file",
    "split_records",
]

QUOTE = '"'
DELIMITER = ","


def split_records(text: str) -> list[list[str]]:
    """Split raw text into records of untrimmed fields."""
    records: list[list[str]] = []
    record: list[str] = []
    field: list[str] = []
    in_quotes = False
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if c == QUOTE:
            if in_quotes and i + 1 < n and text[i + 1] == QUOTE:
                field.append(QUOTE)
                i += 1
            else:
                in_quotes = not in_quotes
        elif c == DELIMITER and not in_quotes:
            record.append("".join(field))
            field = []
        elif c in "\r\n" and not in_quotes:
            if c == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
            record.append("".join(field))
            records.append(record)
            record = []
            field = []
        else:
            field.append(c)
        i += 1

    # flush without trailing terminator
    if field or record:
        record.append("".join(field))
        records.append(record)
    return records


def parse_csv(text: str) -> ParsedTable:
    """Parse CSV text into a ParsedTable.

    Rows whose fields are all blank are dropped; short rows are padded with
    empty strings and surplus fields are ignored. Header names and values are
    trimmed.
    """
    records = split_records(text)
    if not records:
        return ParsedTable(headers=[], rows=[])

    headers = [h.strip() for h in records[0]]
    rows: list[dict[str, str]] = []
    for raw in records[1:]:
        if all(cell.strip() == "" for cell in raw):
            continue
        row: dict[str, str] = {}
        for idx, header in enumerate(headers):
            row[header] = raw[idx].strip() if idx < len(raw) else ""
        rows.append(row)
    return ParsedTable(headers=headers, rows=rows)


def read_csv_file(path: Path) -> ParsedTable:
    """Read a UTF-8 CSV file (a leading byte order mark is discarded).

    Bytes are decoded directly so that line terminators inside quoted fields
    reach the parser untranslated.
    """
    return parse_csv(path.read_bytes().decode("utf-8-sig"))
