from __future__ import annotations

from ..models.import_result import ImportResult

"""SUMMARY line rendering for CSV imports."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small numbers
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ImportResult) -> str:
    """Render the SUMMARY line for one import.

    Format:
    SUMMARY file={name} parsed={parsed} imported={imported} skipped={skipped}
    dry_run={true|false} elapsed_sec={elapsed}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ImportResult(
        ...     source="devices.csv", parsed_rows=3, imported_rows=2, skipped_rows=1,
        ...     start_time=start, end_time=end, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY file=devices.csv parsed=3 imported=2 skipped=1 dry_run=false elapsed_sec=2'
    """
    return (
        f"SUMMARY file={result.source} "
        f"parsed={result.parsed_rows} "
        f"imported={result.imported_rows} "
        f"skipped={result.skipped_rows} "
        f"dry_run={'true' if result.dry_run else 'false'} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
