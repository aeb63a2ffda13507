"""Per-column value pools derived from a source table."""

from typing import List

from csvgen.csv_io import SourceTable


def extract_pool(table: SourceTable, column_name: str) -> List[str]:
    """Collect the distinct non-empty values of a column.

    Values keep the order in which they first appear. Missing and empty
    values are dropped, and a column without usable values (or one the table
    does not have) yields an empty list.

    Args:
        table: Source table to read from.
        column_name: Column to collect values for.

    Returns:
        Ordered list of distinct non-empty values.
    """
    seen = set()
    pool = []

    for record in table.records:
        value = record.get(column_name)
        if value is None or value == '' or value in seen:
            continue
        seen.add(value)
        pool.append(value)

    return pool


def sample_values(table: SourceTable, column_name: str, limit: int = 5) -> List[str]:
    """Return the raw values of the first ``limit`` records for display."""
    return [record.get(column_name, '') for record in table.records[:limit]]
