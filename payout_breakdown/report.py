"""
Text and file output for payout breakdowns.

The formatting helpers only build strings; the host decides where they go.
save_breakdown() and write_report() are the only functions that touch disk.
"""

import csv
import logging
import pathlib

import pandas as pd

from .normalize import format_money, format_signed_amount
from .payouts import sort_payouts

logger = logging.getLogger(__name__)

PLACEHOLDER = '—'
LABEL_WIDTH = 36
DESCRIPTION_WIDTH = 80

BREAKDOWN_COLUMNS = [
    'Payout ID',
    'Payout date',
    'Currency',
    'Payout amount',
    'Kind',
    'Type',
    'Order number',
    'Item title',
    'Description',
    'Date',
    'Net amount',
]


def format_status(payouts):
    return f"Loaded OK (payouts: {len(payouts)})"


def row_label(row):
    """Order number, else item title, else a placeholder; cut to 36 characters."""
    return (row.order_number or row.item_title or PLACEHOLDER)[:LABEL_WIDTH]


def row_description(row):
    return (row.description or row.item_title or PLACEHOLDER)[:DESCRIPTION_WIDTH]


def format_payout_table(payouts):
    """
    Summarize payouts one per line, newest first.

    Args:
        payouts (dict): payout id -> PayoutGroup

    Returns:
        str: Header line plus one line per payout
    """
    lines = [f"{'Payout ID':<20} {'Date':<28} {'Amount':>18} {'Rows':>6}"]
    for group in sort_payouts(payouts):
        amount = format_money(group.payout_amount, group.currency)
        lines.append(
            f"{group.payout_id:<20} {group.payout_date or PLACEHOLDER:<28} {amount:>18} {group.summary.row_count:>6}"
        )
    return '\n'.join(lines)


def format_payout_detail(group):
    """
    Render one payout with its totals and breakdown rows.

    Args:
        group (PayoutGroup): Finalized payout

    Returns:
        str: Multi-line detail text
    """
    currency = group.currency
    lines = [
        f"Payout {group.payout_id}",
        f"{group.payout_date or PLACEHOLDER} / {format_money(group.payout_amount, currency)}",
        '',
        f"Total (Payout):    {format_money(group.payout_amount, currency)}",
        f"Sales total:       {format_money(group.summary.sales_total, currency)}",
        f"Fees total:        {format_money(group.summary.fees_total, currency)}",
        f"Adjustments/Other: {format_money(group.summary.adjustments_total, currency)}",
        '',
    ]
    for row in group.rows:
        lines.append(
            f"{row.date:<28} {row.kind.value:<10} {row_label(row):<36} "
            f"{row_description(row):<80} {format_signed_amount(row.net_amount):>12}"
        )
    return '\n'.join(lines)


def format_reconciliation(result):
    if result.ok:
        return "Reconciliation OK"
    return '\n'.join(["Reconciliation FAILED"] + [f"- {issue}" for issue in result.issues])


def payouts_to_frame(payouts):
    """
    Flatten payouts into one DataFrame row per breakdown row.

    Args:
        payouts (dict): payout id -> PayoutGroup

    Returns:
        pd.DataFrame: Columns as in BREAKDOWN_COLUMNS, empty when there are no rows
    """
    rows = []
    for group in payouts.values():
        for row in group.rows:
            rows.append({
                'Payout ID': group.payout_id,
                'Payout date': group.payout_date,
                'Currency': group.currency,
                'Payout amount': group.payout_amount,
                'Kind': row.kind.value,
                'Type': row.type_raw,
                'Order number': row.order_number,
                'Item title': row.item_title,
                'Description': row.description,
                'Date': row.date,
                'Net amount': row.net_amount,
            })
    if not rows:
        return pd.DataFrame(columns=BREAKDOWN_COLUMNS)
    return pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS)


def save_breakdown(payouts, output_path):
    """
    Save the breakdown rows to CSV or Excel.

    Args:
        payouts (dict): payout id -> PayoutGroup
        output_path (str or pathlib.Path): File path, or a directory to
            receive payout_breakdown.csv

    Returns:
        pathlib.Path: Path written
    """
    result = payouts_to_frame(payouts)

    output_path = pathlib.Path(output_path)
    if output_path.is_dir() or not output_path.suffix:
        output_path = output_path / "payout_breakdown.csv"
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if output_path.suffix.lower() == '.xlsx':
        with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
            result.to_excel(writer, sheet_name='Payout Breakdown', index=False)
    else:
        result.to_csv(output_path, index=False, quoting=csv.QUOTE_NONNUMERIC)

    logger.info(f"Saved {len(result)} breakdown rows to {output_path}")
    return output_path


def write_report(payouts, check, output_path):
    """Write the payout table, every payout's detail and the reconciliation outcome as text."""
    output_path = pathlib.Path(output_path)
    if output_path.is_dir() or not output_path.suffix:
        output_path = output_path / "payout_report.txt"
    output_path.parent.mkdir(parents=True, exist_ok=True)

    sections = [format_status(payouts), format_payout_table(payouts)]
    sections.extend(format_payout_detail(group) for group in sort_payouts(payouts))
    sections.append(format_reconciliation(check))

    logger.debug(f"Writing payout report to {output_path}")
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write('\n\n'.join(sections))
    return output_path
