import pytest
from types import MappingProxyType

HEADER = (
    '"Transaction creation date","Type","Order number","Item ID","Item title",'
    '"Description","Net amount","Payout currency","Payout date","Payout ID"'
)

PREAMBLE = [
    '"Transaction report"',
    '"Seller","example_seller"',
    '"Date range","Jan 1, 2024 - Jan 31, 2024"',
    '',
]

# One payout that balances: 100.00 sale - 2.50 fee = 97.50 transferred
single_payout_rows = [
    '"2024-01-05","Order","12-34567-89012","1234567890","Vintage Lamp","--","100.00","USD","2024-01-10","P-1001"',
    '"2024-01-06","Other fee","--","--","--","Promoted listing fee","-2.50","USD","2024-01-10","P-1001"',
    '"2024-01-10","Payout","--","--","--","--","-97.50","USD","2024-01-10","P-1001"',
]

# Second payout without a payout row, plus a row no payout can claim
multi_payout_rows = single_payout_rows + [
    '"2024-01-20","Order","12-11111-22222","9876543210","Brass Candle Holder","--","40.00","USD","2024-01-25","P-1002"',
    '"2024-01-21","Shipping label","--","--","--","Shipping label","-7.25","USD","2024-01-25","P-1002"',
    '"2024-01-22","Refund","--","--","--","--","-5.00","USD","--","--"',
]


def build_export(rows, preamble=True, line_ending='\n'):
    lines = (PREAMBLE if preamble else []) + [HEADER] + rows
    return line_ending.join(lines) + line_ending


def make_record(**fields):
    """Build a read-only record; keyword underscores become spaces (Net_amount -> 'Net amount')."""
    return MappingProxyType({key.replace('_', ' '): value for key, value in fields.items()})


@pytest.fixture
def single_payout_export():
    """Export text for one balanced payout, with preamble."""
    return build_export(single_payout_rows)


@pytest.fixture
def multi_payout_export():
    """Export text with two payouts and an unattributed row, CRLF line endings."""
    return build_export(multi_payout_rows, line_ending='\r\n')


@pytest.fixture
def balanced_records():
    """The three-row balanced batch used throughout the reconciliation tests."""
    return [
        make_record(Type='Payout', Net_amount='-97.50', Payout_currency='USD'),
        make_record(Type='Sale', Net_amount='100.00'),
        make_record(Type='Fee', Net_amount='-2.50'),
    ]


@pytest.fixture
def export_file(tmp_path, single_payout_export):
    """Single payout export written to disk."""
    path = tmp_path / "transactions.csv"
    path.write_text(single_payout_export, encoding='utf-8')
    return path
