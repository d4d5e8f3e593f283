"""
Grouping ledger rows into payouts.

Each payout identifier becomes one PayoutGroup. Marker rows (Type "payout")
only contribute to the declared transfer total; every other row becomes part
of the breakdown. Amounts are finalized after the last record because a
marker row may come before or after the rows it settles.
"""

import logging

import pandas as pd

from .classify import classify_row
from .models import ClassifiedRow, PayoutGroup, RowKind
from .normalize import (
    get_row_date,
    resolve_currency,
    resolve_payout_date,
    safe_str,
    to_num,
    PAYOUT_ID_COLUMN,
    NET_AMOUNT_COLUMN,
    TYPE_COLUMN,
    ORDER_NUMBER_COLUMN,
    ITEM_TITLE_COLUMN,
    DESCRIPTION_COLUMN,
)

logger = logging.getLogger(__name__)


def new_payout_group(payout_id, record):
    """Start a group from the first record seen for payout_id; currency comes from that record."""
    return PayoutGroup(payout_id=payout_id, currency=resolve_currency(record))


def build_classified_row(record, kind, net_amount):
    return ClassifiedRow(
        kind=kind,
        type_raw=safe_str(record.get(TYPE_COLUMN)),
        order_number=safe_str(record.get(ORDER_NUMBER_COLUMN)),
        item_title=safe_str(record.get(ITEM_TITLE_COLUMN)),
        description=safe_str(record.get(DESCRIPTION_COLUMN)),
        net_amount=net_amount,
        date=get_row_date(record),
    )


def add_breakdown_row(group, row):
    """Append a row to a group and add its amount to the matching total."""
    group.rows.append(row)
    group.summary.row_count += 1
    if row.kind == RowKind.SALE:
        group.summary.sales_total += row.net_amount
    elif row.kind == RowKind.FEE:
        group.summary.fees_total += row.net_amount
    else:
        group.summary.adjustments_total += row.net_amount


def finalize_payout(group, declared_total):
    """Set payout_amount: the declared transfer total when positive, else the breakdown sum."""
    if declared_total > 0:
        group.payout_amount = declared_total
    else:
        group.payout_amount = sum(row.net_amount for row in group.rows)
    return group


def build_payouts(records):
    """
    Group records by payout identifier.

    Records without a payout identifier are dropped. The first record of a
    group sets its currency; the group date is the first non-empty creation
    or payout date among its records. Several marker rows for the same
    payout are summed.

    Args:
        records (Iterable[Mapping[str, str]]): Parsed rows in source order

    Returns:
        dict: payout id -> finalized PayoutGroup, in first-seen order
    """
    payouts = {}
    declared_totals = {}
    skipped = 0

    for record in records:
        payout_id = safe_str(record.get(PAYOUT_ID_COLUMN))
        if not payout_id:
            skipped += 1
            continue

        is_first_record = payout_id not in payouts
        if is_first_record:
            payouts[payout_id] = new_payout_group(payout_id, record)
            declared_totals[payout_id] = 0.0
        group = payouts[payout_id]

        if not group.payout_date:
            group.payout_date = resolve_payout_date(record)

        net_amount = to_num(record.get(NET_AMOUNT_COLUMN))
        kind = classify_row(record)
        if kind == RowKind.PAYOUT:
            declared_totals[payout_id] += abs(net_amount)
            continue

        add_breakdown_row(group, build_classified_row(record, kind, net_amount))

    for payout_id, group in payouts.items():
        finalize_payout(group, declared_totals[payout_id])

    if skipped:
        logger.debug(f"Dropped {skipped} records without a payout ID")
    logger.info(f"Built {len(payouts)} payouts")

    return payouts


def sort_payouts(payouts):
    """
    Order payouts newest first.

    Args:
        payouts (dict): payout id -> PayoutGroup

    Returns:
        list: PayoutGroups by payout_date descending; unparseable dates last,
            ties kept in first-seen order
    """
    groups = list(payouts.values())
    if not groups:
        return []
    dates = pd.to_datetime(
        pd.Series([group.payout_date for group in groups], dtype=object),
        errors='coerce',
        utc=True,
        format='mixed',
    )
    timestamps = [0.0 if pd.isna(d) else d.timestamp() for d in dates]
    order = sorted(range(len(groups)), key=lambda i: timestamps[i], reverse=True)
    return [groups[i] for i in order]
