"""
Row classification.

Rules are checked top-down and the first match wins. The payout marker must
stay first: a payout row that also carries an order number is still the
payout itself, not a sale.
"""

from .models import RowKind
from .normalize import (
    safe_str,
    TYPE_COLUMN,
    ORDER_NUMBER_COLUMN,
    ITEM_ID_COLUMN,
    DESCRIPTION_COLUMN,
)


def is_payout_marker(record):
    return safe_str(record.get(TYPE_COLUMN)).lower() == 'payout'


def has_order_reference(record):
    return bool(safe_str(record.get(ORDER_NUMBER_COLUMN)) or safe_str(record.get(ITEM_ID_COLUMN)))


def mentions_fee(record):
    row_type = safe_str(record.get(TYPE_COLUMN)).lower()
    description = safe_str(record.get(DESCRIPTION_COLUMN)).lower()
    return 'fee' in row_type or 'fee' in description


CLASSIFICATION_RULES = [
    (is_payout_marker, RowKind.PAYOUT),
    (has_order_reference, RowKind.SALE),
    (mentions_fee, RowKind.FEE),
]


def classify_row(record, rules=None):
    """
    Assign a record to a category.

    Args:
        record (Mapping[str, str]): Parsed row
        rules (list, optional): (predicate, RowKind) pairs to use instead of
            CLASSIFICATION_RULES

    Returns:
        RowKind: First matching category, ADJUSTMENT when nothing matches
    """
    for predicate, kind in (CLASSIFICATION_RULES if rules is None else rules):
        if predicate(record):
            return kind
    return RowKind.ADJUSTMENT
