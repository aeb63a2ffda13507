"""Pytest Helper Functions - Use saved templates to drive CSV tests.

This module provides pytest fixtures and helper functions to feed test suites
with CSV files generated from saved templates, and assertions for checking
generated files.

Typical usage example in test files:
    from csvgen.pytest_helpers import create_test_csv_file, load_template

    def test_import_orders(tmp_path):
        template = load_template('config.json', 'orders')
        csv_path = create_test_csv_file(template, tmp_path / 'orders.csv', seed=42)
        assert import_orders(csv_path).ok
"""

import csv
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Union

import pytest

from csvgen.csv_io import read_output_rows, write_output_table
from csvgen.synthesizer import make_rng, synthesize
from csvgen.template_store import InMemoryTemplateStore, JsonTemplateStore, Template


# ============================================================================
# Pytest Fixtures
# ============================================================================


@pytest.fixture
def template_store() -> InMemoryTemplateStore:
    """Fixture providing an empty in-memory template store.

    Returns:
        InMemoryTemplateStore with no templates.
    """
    return InMemoryTemplateStore()


@pytest.fixture
def seeded_rng(request):
    """Fixture providing a seeded rng callable.

    The seed defaults to 42 and can be overridden by indirect parametrization.
    """
    seed = getattr(request, 'param', 42)
    return make_rng(seed)


@pytest.fixture
def temp_csv_file(tmp_path: Path) -> Path:
    """Fixture providing a not-yet-created CSV path inside tmp_path."""
    return tmp_path / "generated.csv"


@pytest.fixture
def generated_csv(request, temp_csv_file: Path) -> Path:
    """Fixture that writes a CSV generated from a template.

    Usage:
        @pytest.mark.parametrize('generated_csv', [my_template], indirect=True)
        def test_parser(generated_csv):
            assert parse(generated_csv)

    Args:
        request: Pytest request fixture providing the Template.
        temp_csv_file: Temporary file path fixture.

    Returns:
        Path to generated CSV file.
    """
    template = request.param
    return create_test_csv_file(template, temp_csv_file, seed=0)


# ============================================================================
# Helper Functions
# ============================================================================


def load_template(store_path: Union[str, Path], name: str) -> Template:
    """Load a named template from a JSON template document.

    Args:
        store_path: Path to the template document.
        name: Template name.

    Returns:
        The stored Template.

    Raises:
        FileNotFoundError: If the template document doesn't exist.
        LookupError: If no template has that name.
    """
    store_path = Path(store_path)
    if not store_path.exists():
        raise FileNotFoundError(f"Template document not found: {store_path}")

    template = JsonTemplateStore(store_path).find(name)
    if template is None:
        raise LookupError(f"Template '{name}' not found in {store_path}")
    return template


def generate_test_records(
    template: Template,
    num_rows: Optional[int] = None,
    seed: Optional[int] = None
) -> List[Dict[str, Any]]:
    """Generate records from a template without writing a file.

    Args:
        template: Template to generate from.
        num_rows: Number of records (None = the template's record count).
        seed: Optional random seed for reproducibility.

    Returns:
        List of records keyed by column name.
    """
    if num_rows is None:
        num_rows = template.num_records
    return synthesize(template.column_configs, num_rows, make_rng(seed))


def create_test_csv_file(
    template: Template,
    output_path: Union[str, Path],
    num_rows: Optional[int] = None,
    seed: Optional[int] = None,
    include_header: Optional[bool] = None
) -> Path:
    """Create a test CSV file from a template.

    Args:
        template: Template to generate from.
        output_path: Where to write the CSV file.
        num_rows: Number of records (None = the template's record count).
        seed: Optional random seed for reproducibility.
        include_header: Whether to include header (None = template default).

    Returns:
        Path to created CSV file.
    """
    if include_header is None:
        include_header = template.include_header

    records = generate_test_records(template, num_rows=num_rows, seed=seed)
    return write_output_table(
        records,
        template.column_names(),
        output_path,
        include_header=include_header
    )


def csv_test_data_generator(
    store_path: Union[str, Path],
    name: str,
    num_files: int = 1,
    rows_per_file: Optional[int] = None,
    seed: Optional[int] = None
) -> Generator[Path, None, None]:
    """Generator that yields temporary CSV files for testing.

    All files share one rng, so with a seed the sequence of files is
    reproducible while each file differs from the others.

    Usage:
        for csv_file in csv_test_data_generator('config.json', 'orders', num_files=5):
            result = process_csv(csv_file)
            assert result.is_valid

    Args:
        store_path: Path to the template document.
        name: Template name.
        num_files: Number of CSV files to generate.
        rows_per_file: Records per file (None = the template's record count).
        seed: Optional random seed.

    Yields:
        Path objects to temporary CSV files.
    """
    template = load_template(store_path, name)
    rng = make_rng(seed)
    num_rows = rows_per_file or template.num_records

    for _ in range(num_files):
        with tempfile.NamedTemporaryFile(suffix='.csv', delete=False) as tmp_file:
            tmp_path = Path(tmp_file.name)

        try:
            records = synthesize(template.column_configs, num_rows, rng)
            write_output_table(
                records,
                template.column_names(),
                tmp_path,
                include_header=template.include_header
            )
            yield tmp_path
        finally:
            tmp_path.unlink()


MAX_WIDTH_ERRORS = 5


def validate_csv_structure(
    csv_path: Union[str, Path],
    template: Template
) -> Dict[str, Any]:
    """Check a generated CSV file against the template it came from.

    The header (when the template has one) must equal the template's column
    names and every data row must have one field per column. A data row
    count different from the template's is only a warning, since callers
    often override it.

    Args:
        csv_path: CSV file to check.
        template: Template the file is expected to follow.

    Returns:
        Dictionary with keys ``valid`` (bool), ``errors`` and ``warnings``
        (lists of messages) and ``stats`` (rows and columns checked).
    """
    csv_path = Path(csv_path)
    result: Dict[str, Any] = {
        'valid': False,
        'errors': [],
        'warnings': [],
        'stats': {'rows_checked': 0, 'columns_checked': 0},
    }
    errors = result['errors']

    if not csv_path.exists():
        errors.append(f"File not found: {csv_path}")
        return result

    try:
        rows = read_output_rows(csv_path)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        errors.append(f"Unreadable CSV: {e}")
        return result

    if not rows:
        errors.append("CSV file is empty")
        return result

    columns = template.column_names()
    result['stats'] = {'rows_checked': len(rows), 'columns_checked': len(columns)}

    data_rows = rows
    if template.include_header:
        header, data_rows = rows[0], rows[1:]
        if header != columns:
            errors.append(f"Header mismatch. Expected: {columns}, Got: {header}")

    ragged = [
        (number, len(row))
        for number, row in enumerate(data_rows, start=1)
        if len(row) != len(columns)
    ]
    for number, width in ragged[:MAX_WIDTH_ERRORS]:
        errors.append(f"Row {number}: Expected {len(columns)} columns, got {width}")
    if len(ragged) > MAX_WIDTH_ERRORS:
        errors.append(f"... and {len(ragged) - MAX_WIDTH_ERRORS} more rows with the wrong width")

    if not data_rows:
        result['warnings'].append("Header only, no data rows")
    elif len(data_rows) != template.num_records:
        result['warnings'].append(
            f"Template asks for {template.num_records} data rows, file has {len(data_rows)}"
        )

    result['valid'] = not errors
    return result


# ============================================================================
# Assertion Helpers
# ============================================================================


def assert_csv_readable(csv_path: Union[str, Path], encoding: str = 'utf-8') -> None:
    """Fail unless the file exists and holds at least one CSV row."""
    csv_path = Path(csv_path)

    assert csv_path.is_file(), f"No CSV file at {csv_path}"
    rows = read_output_rows(csv_path, encoding=encoding)
    assert rows, f"{csv_path} has no rows"


def assert_csv_row_count(
    csv_path: Union[str, Path],
    expected_count: int,
    has_header: bool = True
) -> None:
    """Fail unless the file has ``expected_count`` data rows.

    Args:
        csv_path: CSV file to count.
        expected_count: Data rows the file should have.
        has_header: Leave the first row out of the count.
    """
    rows = read_output_rows(csv_path)
    data_rows = len(rows) - 1 if has_header and rows else len(rows)

    assert data_rows == expected_count, (
        f"{csv_path}: {data_rows} data rows, wanted {expected_count}"
    )


def assert_csv_columns(
    csv_path: Union[str, Path],
    expected_columns: List[str]
) -> None:
    """Fail unless the file's first row is exactly ``expected_columns``."""
    rows = read_output_rows(csv_path)
    header = rows[0] if rows else []

    assert header == expected_columns, f"{csv_path}: header {header}, wanted {expected_columns}"
