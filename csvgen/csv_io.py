"""Reading source CSV files and writing generated ones.

The reader turns a delimited text file into a SourceTable: the ordered column
names from the header row plus one dict per data record. The writer does the
reverse for generated records.
"""

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple, Union

from csvgen.errors import SourceEmptyError, SourceNotFoundError, SourceParseError
from csvgen.logsetup import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class SourceTable:
    """Parsed contents of a source CSV file.

    Attributes:
        path: File the table was read from.
        columns: Column names in header order, unique.
        records: One mapping of column name to string value per data row.
    """

    path: str
    columns: Tuple[str, ...]
    records: Tuple[Dict[str, str], ...]

    def __len__(self) -> int:
        return len(self.records)


def _detect_dialect(sample: str) -> Any:
    """Sniff the CSV dialect from a text sample, falling back to excel."""
    try:
        return csv.Sniffer().sniff(sample, delimiters=',;\t|')
    except csv.Error:
        return csv.excel()


def read_source_table(filepath: Union[str, Path], encoding: str = 'utf-8-sig') -> SourceTable:
    """Read a CSV file with a header row into a SourceTable.

    Blank lines are skipped. Every data record must have exactly as many
    fields as the header.

    Args:
        filepath: Path to the source CSV file.
        encoding: File encoding (default: 'utf-8-sig', which drops a
            leading byte order mark such as the one Excel writes).

    Returns:
        SourceTable with columns and records.

    Raises:
        SourceNotFoundError: If the file does not exist.
        SourceParseError: If the file cannot be decoded or parsed, or the
            header is unusable.
        SourceEmptyError: If the file holds no data records.
    """
    filepath = Path(filepath)

    if not filepath.is_file():
        raise SourceNotFoundError(f"CSV file not found: {filepath}")

    try:
        with open(filepath, 'r', encoding=encoding, newline='') as f:
            dialect = _detect_dialect(f.read(8192))
            f.seek(0)
            rows = [row for row in csv.reader(f, dialect=dialect) if row]
    except UnicodeDecodeError as e:
        raise SourceParseError(f"Could not decode {filepath} as {encoding}: {e}") from e
    except csv.Error as e:
        raise SourceParseError(f"Could not parse {filepath}: {e}") from e

    if not rows:
        raise SourceEmptyError(f"CSV file is empty or could not be parsed: {filepath}")

    header = [name.strip() for name in rows[0]]
    if any(not name for name in header):
        raise SourceParseError(f"Header row of {filepath} contains a blank column name")
    if len(set(header)) != len(header):
        raise SourceParseError(f"Header row of {filepath} contains duplicate column names")

    records = []
    for line_no, row in enumerate(rows[1:], start=2):
        if len(row) != len(header):
            raise SourceParseError(
                f"{filepath} record {line_no}: expected {len(header)} fields, got {len(row)}"
            )
        records.append(dict(zip(header, row)))

    if not records:
        raise SourceEmptyError(f"CSV file has a header but no data records: {filepath}")

    logger.debug(
        "Read %d records with %d columns from %s (delimiter %r)",
        len(records), len(header), filepath, dialect.delimiter
    )

    return SourceTable(path=str(filepath), columns=tuple(header), records=tuple(records))


def format_value(value: Any) -> str:
    """Render a generated value as CSV cell text.

    Integral floats lose their trailing ``.0`` so a sequence started at 1.0
    with step 1 writes ``1, 2, 3``.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def write_output_table(
    records: Sequence[Dict[str, Any]],
    columns: Sequence[str],
    output_path: Union[str, Path],
    include_header: bool = True,
    encoding: str = 'utf-8'
) -> Path:
    """Write generated records to a CSV file.

    Args:
        records: Generated records, keyed by column name.
        columns: Column order for the output, also used as the header row.
        output_path: Where the CSV should be written.
        include_header: Whether to write the header row (default: True).
        encoding: File encoding (default: 'utf-8').

    Returns:
        Path of the written file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding=encoding, newline='') as f:
        writer = csv.writer(f)

        if include_header:
            writer.writerow(list(columns))

        for record in records:
            writer.writerow([format_value(record.get(column, '')) for column in columns])

    logger.info("Wrote %d records to %s", len(records), output_path)
    return output_path


def read_output_rows(csv_path: Union[str, Path], encoding: str = 'utf-8') -> List[List[str]]:
    """Read a generated CSV back as raw rows (header included if present)."""
    with open(csv_path, 'r', encoding=encoding, newline='') as f:
        return list(csv.reader(f))
