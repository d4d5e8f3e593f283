"""
Reporting Tests

This module tests the text summaries and the files written for a breakdown.

Test Coverage:
- Status line, payout table and payout detail text
- Reconciliation outcome text
- Breakdown DataFrame layout
- CSV, Excel and text report output
"""

import pandas as pd
import pytest
from payout_breakdown.models import ClassifiedRow, PayoutGroup, ReconciliationResult, RowKind
from payout_breakdown.parsing import parse_export
from payout_breakdown.payouts import build_payouts
from payout_breakdown.report import (
    format_status,
    format_payout_table,
    format_payout_detail,
    format_reconciliation,
    payouts_to_frame,
    row_label,
    row_description,
    save_breakdown,
    write_report,
    BREAKDOWN_COLUMNS
)


@pytest.fixture
def multi_payouts(multi_payout_export):
    return build_payouts(parse_export(multi_payout_export).records)


def make_row(**overrides):
    fields = dict(
        kind=RowKind.ADJUSTMENT,
        type_raw='Other',
        order_number='',
        item_title='',
        description='',
        net_amount=0.0,
        date='--',
    )
    fields.update(overrides)
    return ClassifiedRow(**fields)


class TestTextOutput:
    """Test suite for text summaries."""

    def test_status(self, multi_payouts):
        assert format_status(multi_payouts) == "Loaded OK (payouts: 2)"
        assert format_status({}) == "Loaded OK (payouts: 0)"

    def test_payout_table(self, multi_payouts):
        lines = format_payout_table(multi_payouts).split('\n')
        assert lines[0].startswith('Payout ID')
        assert lines[1].startswith('P-1002')
        assert 'USD $32.75' in lines[1]
        assert lines[2].startswith('P-1001')
        assert 'USD $97.50' in lines[2]
        assert lines[2].rstrip().endswith('2')

    def test_payout_table_placeholder_date(self):
        payouts = {'P-9': PayoutGroup(payout_id='P-9')}
        assert '—' in format_payout_table(payouts).split('\n')[1]

    def test_payout_detail(self, multi_payouts):
        detail = format_payout_detail(multi_payouts['P-1001'])
        assert detail.startswith('Payout P-1001\n2024-01-05 / USD $97.50')
        assert 'Sales total:       USD $100.00' in detail
        assert 'Fees total:        USD $-2.50' in detail
        assert 'Adjustments/Other: USD $0.00' in detail
        assert '+100.00' in detail
        assert '-2.50' in detail
        assert 'Promoted listing fee' in detail

    def test_row_label(self):
        assert row_label(make_row(order_number='12-3', item_title='Lamp')) == '12-3'
        assert row_label(make_row(item_title='Lamp')) == 'Lamp'
        assert row_label(make_row()) == '—'
        assert len(row_label(make_row(item_title='x' * 50))) == 36

    def test_row_description(self):
        assert row_description(make_row(description='Fee', item_title='Lamp')) == 'Fee'
        assert row_description(make_row(item_title='Lamp')) == 'Lamp'
        assert row_description(make_row()) == '—'
        assert len(row_description(make_row(description='y' * 100))) == 80

    def test_reconciliation_ok(self):
        result = ReconciliationResult(ok=True, payout_amount=97.5, balance=0.0)
        assert format_reconciliation(result) == "Reconciliation OK"

    def test_reconciliation_failed(self):
        result = ReconciliationResult(
            ok=False, payout_amount=0.0, balance=1.0,
            issues=["Expected exactly 1 payout row, found 0", "Unbalanced: difference=1.00"],
        )
        assert format_reconciliation(result).split('\n') == [
            "Reconciliation FAILED",
            "- Expected exactly 1 payout row, found 0",
            "- Unbalanced: difference=1.00",
        ]


class TestBreakdownFrame:
    """Test suite for flattening payouts into a DataFrame."""

    def test_columns_and_rows(self, multi_payouts):
        df = payouts_to_frame(multi_payouts)
        assert list(df.columns) == BREAKDOWN_COLUMNS
        assert len(df) == 4
        assert df['Kind'].tolist() == ['sale', 'fee', 'sale', 'adjustment']
        assert df.loc[df['Payout ID'] == 'P-1002', 'Payout amount'].tolist() == [32.75, 32.75]

    def test_empty(self):
        df = payouts_to_frame({})
        assert df.empty
        assert list(df.columns) == BREAKDOWN_COLUMNS


class TestFileOutput:
    """Test suite for writing results."""

    def test_save_csv_to_directory(self, tmp_path, multi_payouts):
        path = save_breakdown(multi_payouts, tmp_path)
        assert path == tmp_path / "payout_breakdown.csv"
        saved = pd.read_csv(path, dtype=str, keep_default_na=False)
        assert list(saved.columns) == BREAKDOWN_COLUMNS
        assert saved['Order number'].tolist()[0] == '12-34567-89012'
        assert len(saved) == 4

    def test_save_csv_quotes_text(self, tmp_path, multi_payouts):
        path = save_breakdown(multi_payouts, tmp_path / "out.csv")
        first_line = path.read_text().split('\n')[0]
        assert first_line.startswith('"Payout ID","Payout date"')

    def test_save_excel(self, tmp_path, multi_payouts):
        path = save_breakdown(multi_payouts, tmp_path / "breakdown.xlsx")
        saved = pd.read_excel(path, sheet_name='Payout Breakdown')
        assert len(saved) == 4

    def test_creates_parent_directories(self, tmp_path, multi_payouts):
        path = save_breakdown(multi_payouts, tmp_path / "nested" / "dir" / "out.csv")
        assert path.exists()

    def test_write_report(self, tmp_path, multi_payouts):
        check = ReconciliationResult(ok=False, payout_amount=97.5, balance=27.75,
                                     issues=["Unbalanced: difference=27.75"])
        path = write_report(multi_payouts, check, tmp_path)
        content = path.read_text(encoding='utf-8')
        assert path.name == "payout_report.txt"
        assert content.startswith("Loaded OK (payouts: 2)")
        assert 'Payout P-1001' in content
        assert 'Payout P-1002' in content
        assert content.endswith("- Unbalanced: difference=27.75")
