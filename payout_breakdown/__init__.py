"""
Payout Breakdown - split a marketplace transaction export into payouts.

This package provides functionality to:
- Find the real CSV header inside an export that starts with preamble text
- Parse the rows into read-only records, collecting parse problems
- Classify rows as payout markers, sales, fees or adjustments
- Group rows by Payout ID with per-category totals
- Check that the export balances against its payout row

Each payout group contains:
- payout_id: Payout identifier from the export
- payout_date: First transaction creation date (else payout date) seen
- currency: Payout currency of the group's first row (USD if missing)
- payout_amount: Declared transfer amount, or the breakdown sum without one
- summary: Sales, fees and adjustments totals plus the row count
- rows: Breakdown rows in source order
"""

from .models import (
    RowKind,
    ClassifiedRow,
    PayoutSummary,
    PayoutGroup,
    ParseResult,
    ReconciliationResult
)
from .normalize import (
    safe_str,
    to_num,
    get_row_date,
    format_money
)
from .parsing import (
    slice_to_header,
    parse_records,
    parse_export,
    load_export
)
from .classify import classify_row
from .payouts import build_payouts, sort_payouts
from .reconcile import check_payout_balance, process_export

__all__ = [
    'RowKind',
    'ClassifiedRow',
    'PayoutSummary',
    'PayoutGroup',
    'ParseResult',
    'ReconciliationResult',
    'safe_str',
    'to_num',
    'get_row_date',
    'format_money',
    'slice_to_header',
    'parse_records',
    'parse_export',
    'load_export',
    'classify_row',
    'build_payouts',
    'sort_payouts',
    'check_payout_balance',
    'process_export'
]
