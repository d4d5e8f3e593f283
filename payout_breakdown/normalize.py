"""
Field normalization for marketplace transaction exports.

Every helper here is total: missing cells, the export's "--" placeholder and
garbage text all collapse to an empty string, a zero amount or the "--" date
sentinel instead of raising.
"""

import math
import re
import sys
from decimal import Decimal, ROUND_HALF_UP

import numpy as np
import pandas as pd

# Column names used by the export
TRANSACTION_DATE_COLUMN = 'Transaction creation date'
PAYOUT_ID_COLUMN = 'Payout ID'
PAYOUT_DATE_COLUMN = 'Payout date'
PAYOUT_CURRENCY_COLUMN = 'Payout currency'
NET_AMOUNT_COLUMN = 'Net amount'
TYPE_COLUMN = 'Type'
ORDER_NUMBER_COLUMN = 'Order number'
ITEM_ID_COLUMN = 'Item ID'
ITEM_TITLE_COLUMN = 'Item title'
DESCRIPTION_COLUMN = 'Description'

MISSING_VALUE = '--'
DEFAULT_CURRENCY = 'USD'

# Tried in order before falling back to any column with "date" in its name
ROW_DATE_COLUMNS = [
    'Transaction creation date',
    'Transaction creation date (UTC)',
    'Transaction date',
    'Date',
]

_NON_NUMERIC = re.compile(r'[^0-9.\-]')
_NUMERIC_PREFIX = re.compile(r'-?(?:\d+\.?\d*|\.\d+)')
_DATE_KEY = re.compile(r'date', re.IGNORECASE)
_CENTS = Decimal('0.01')


def _is_missing(value):
    return value is None or (pd.api.types.is_scalar(value) and pd.isna(value))


def safe_str(value):
    """
    Normalize a raw cell to a clean string.

    Args:
        value: Raw cell value, possibly None

    Returns:
        str: Trimmed text, or '' for missing cells and the '--' placeholder
    """
    if _is_missing(value):
        return ''
    text = str(value).strip()
    return '' if text == MISSING_VALUE else text


def to_num(value):
    """
    Parse an amount leniently.

    Everything except digits, '.' and '-' is dropped and the longest leading
    number is taken, so '$1,234.50' gives 1234.5 and '1.2.3' gives 1.2.

    Args:
        value: Raw cell value

    Returns:
        float: Parsed amount, 0.0 when nothing numeric is left
    """
    if _is_missing(value):
        return 0.0
    cleaned = _NON_NUMERIC.sub('', str(value))
    match = _NUMERIC_PREFIX.match(cleaned)
    if not match:
        return 0.0
    result = float(match.group(0))
    return result if np.isfinite(result) else 0.0


def parse_plain_amount(value):
    """Parse an amount after removing thousands separators; 0.0 if not a number."""
    if _is_missing(value):
        return 0.0
    text = str(value).replace(',', '').strip()
    if not text:
        return 0.0
    try:
        result = float(text)
    except ValueError:
        return 0.0
    return result if np.isfinite(result) else 0.0


def get_row_date(record):
    """
    Resolve the date shown for a single row.

    The known date columns are tried in order first. Failing that, the first
    column whose name contains "date" (any case) and holds a value is used.

    Args:
        record (Mapping[str, str]): Parsed row

    Returns:
        str: Trimmed date text, or '--' when no date is available
    """
    for column in ROW_DATE_COLUMNS:
        value = record.get(column)
        if not _is_missing(value) and str(value).strip():
            return str(value).strip()

    for column, value in record.items():
        if _DATE_KEY.search(column) and not _is_missing(value) and str(value).strip():
            return str(value).strip()

    return MISSING_VALUE


def resolve_payout_date(record):
    """Date a payout group takes from a row: creation date, else payout date, else ''."""
    return safe_str(record.get(TRANSACTION_DATE_COLUMN)) or safe_str(record.get(PAYOUT_DATE_COLUMN))


def resolve_currency(record):
    return safe_str(record.get(PAYOUT_CURRENCY_COLUMN)) or DEFAULT_CURRENCY


def round_money(amount):
    """
    Round to cents with halves going towards +infinity.

    The amount is nudged by machine epsilon first so 1.005 rounds to 1.01,
    and -2.125 rounds to -2.12. Whole cents are counted as an int, so a tiny
    negative amount comes out as 0.00, never -0.00.
    """
    cents = math.floor((float(amount) + sys.float_info.epsilon) * 100 + 0.5)
    return Decimal(cents).scaleb(-2)


def format_money(amount, currency):
    """
    Render an amount for display.

    Args:
        amount (float): Amount to render
        currency (str): Currency code

    Returns:
        str: e.g. 'USD $1.01'
    """
    return f"{currency} ${round_money(amount)}"


def format_signed_amount(amount):
    """
    Render a net amount with an explicit sign for non-negative values: '+1.50'.

    Uses the exact binary value of the amount with halves rounded away from
    zero, so 0.125 gives '+0.13'.
    """
    if amount == 0:
        amount = 0.0
    sign = '+' if amount >= 0 else ''
    return f"{sign}{Decimal(float(amount)).quantize(_CENTS, rounding=ROUND_HALF_UP)}"
