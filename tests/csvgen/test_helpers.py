"""Example pytest tests using the template-driven CSV helpers.

These show how a downstream suite can turn a saved template into CSV
fixtures and check the generated files.
"""

import csv
from pathlib import Path

import pytest

from csvgen.pytest_helpers import (
    assert_csv_columns,
    assert_csv_readable,
    assert_csv_row_count,
    create_test_csv_file,
    csv_test_data_generator,
    generate_test_records,
    load_template,
    validate_csv_structure,
)
from csvgen.strategies import CyclicList, NumericRange, PrefixedRandomString, SequentialNumeric
from csvgen.template_store import JsonTemplateStore, Template


ORDERS = Template(
    name='orders',
    source_file='orders.csv',
    column_configs=[
        SequentialNumeric(header='order_id', start=1000, step=1),
        PrefixedRandomString(header='customer', prefix='CUST-', length=5),
        NumericRange(header='quantity', min=1, max=9),
        CyclicList(header='state', values=('new', 'paid', 'shipped')),
    ],
    num_records=25,
    include_header=True,
)


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    """Template document holding the orders template."""
    path = tmp_path / "config.json"
    JsonTemplateStore(path).save(ORDERS)
    return path


class TestTemplateCsvFiles:
    """Generating CSV files from templates."""

    def test_create_file_with_template_defaults(self, tmp_path):
        """Verify the template's row count and header are used."""
        csv_path = create_test_csv_file(ORDERS, tmp_path / "orders.csv", seed=42)

        assert_csv_readable(csv_path)
        assert_csv_row_count(csv_path, expected_count=25)
        assert_csv_columns(csv_path, ['order_id', 'customer', 'quantity', 'state'])

    def test_overrides(self, tmp_path):
        """Verify row count and header can be overridden."""
        csv_path = create_test_csv_file(
            ORDERS, tmp_path / "orders.csv", num_rows=3, include_header=False
        )

        assert_csv_row_count(csv_path, expected_count=3, has_header=False)

    def test_parse_generated_orders(self, tmp_path):
        """Verify generated values match their strategies when parsed back."""
        csv_path = create_test_csv_file(ORDERS, tmp_path / "orders.csv", seed=1)

        with open(csv_path, 'r', newline='') as f:
            rows = list(csv.DictReader(f))

        assert [int(r['order_id']) for r in rows] == list(range(1000, 1025))
        assert all(1 <= int(r['quantity']) <= 9 for r in rows)
        assert all(r['customer'].startswith('CUST-') for r in rows)
        assert rows[3]['state'] == 'new'

    def test_records_without_file(self):
        """Verify records can be generated in memory."""
        records = generate_test_records(ORDERS, num_rows=4, seed=7)

        assert [r['state'] for r in records] == ['new', 'paid', 'shipped', 'new']

    def test_seed_reproduces_records(self):
        """Verify the same seed gives the same records."""
        assert generate_test_records(ORDERS, seed=3) == generate_test_records(ORDERS, seed=3)

    @pytest.mark.parametrize('generated_csv', [ORDERS], indirect=True)
    def test_generated_csv_fixture(self, generated_csv):
        """Verify the generated_csv fixture writes the template's file."""
        assert_csv_row_count(generated_csv, expected_count=ORDERS.num_records)


class TestTemplateLookup:
    """Loading templates from a document."""

    def test_load_template(self, store_path):
        """Verify a stored template loads by name."""
        assert load_template(store_path, 'orders') == ORDERS

    def test_missing_document(self, tmp_path):
        """Verify a missing document raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_template(tmp_path / "none.json", 'orders')

    def test_unknown_name(self, store_path):
        """Verify an unknown name raises LookupError."""
        with pytest.raises(LookupError):
            load_template(store_path, 'invoices')

    def test_temporary_files_cleaned_up(self, store_path):
        """Verify generated temporary files exist during use and are removed after."""
        seen = []
        for csv_file in csv_test_data_generator(store_path, 'orders', num_files=3, rows_per_file=5, seed=9):
            assert_csv_row_count(csv_file, expected_count=5)
            seen.append(csv_file)

        assert len(set(seen)) == 3
        assert not any(p.exists() for p in seen)


class TestValidation:
    """Structure validation of generated files."""

    def test_valid_file(self, tmp_path):
        """Verify a freshly generated file validates cleanly."""
        csv_path = create_test_csv_file(ORDERS, tmp_path / "orders.csv", seed=5)

        result = validate_csv_structure(csv_path, ORDERS)

        assert result['valid'] is True
        assert result['warnings'] == []
        assert result['stats'] == {'rows_checked': 26, 'columns_checked': 4}

    def test_header_mismatch(self, tmp_path):
        """Verify a wrong header is reported."""
        csv_path = tmp_path / "bad.csv"
        csv_path.write_text("a,b,c,d\n1,2,3,4\n", encoding='utf-8')

        result = validate_csv_structure(csv_path, ORDERS)

        assert result['valid'] is False
        assert result['errors'][0].startswith("Header mismatch")

    def test_ragged_rows(self, tmp_path):
        """Verify rows with the wrong width are reported."""
        csv_path = tmp_path / "ragged.csv"
        csv_path.write_text("order_id,customer,quantity,state\n1,2\n", encoding='utf-8')

        result = validate_csv_structure(csv_path, ORDERS)

        assert result['errors'] == ["Row 1: Expected 4 columns, got 2"]

    def test_missing_file(self, tmp_path):
        """Verify a missing file is invalid."""
        result = validate_csv_structure(tmp_path / "nope.csv", ORDERS)

        assert result['valid'] is False
        assert result['errors'] == [f"File not found: {tmp_path / 'nope.csv'}"]
