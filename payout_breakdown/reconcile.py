"""
Payout Reconciliation

An export is expected to cover exactly one payout: a single "Payout" row
carrying the (negative) transfer plus the sales, fees and adjustments it
settles. Summed together they should come to zero.

The check runs over the parsed records directly, not over the grouping
built by payouts.build_payouts, so the two results are independent.

Checks:
1. Exactly one payout row
2. |payout rows + other rows| < 0.01
3. At most one payout currency
"""

import argparse
import logging
import pathlib
import sys

from .models import ReconciliationResult
from .normalize import (
    parse_plain_amount,
    MISSING_VALUE,
    NET_AMOUNT_COLUMN,
    PAYOUT_CURRENCY_COLUMN,
    TYPE_COLUMN,
)
from .parsing import load_export, parse_export
from .payouts import build_payouts
from .report import (
    format_payout_detail,
    format_payout_table,
    format_reconciliation,
    format_status,
    save_breakdown,
    write_report,
)
from .utils import ensure_directory, setup_logging

logger = logging.getLogger(__name__)

BALANCE_TOLERANCE = 0.01
PAYOUT_TYPE = 'Payout'


def collect_currencies(records):
    """Distinct payout currencies in first-seen order, ignoring blanks and '--'."""
    currencies = {}
    for record in records:
        currency = record.get(PAYOUT_CURRENCY_COLUMN)
        if currency and currency != MISSING_VALUE:
            currencies[currency] = True
    return list(currencies)


def check_payout_balance(records):
    """
    Check that an export balances against its payout row.

    Args:
        records (list): Parsed rows of one export

    Returns:
        ReconciliationResult: ok flag, transfer amount, balance and one issue
            per failed check
    """
    payout_net = 0.0
    others_net = 0.0
    payout_rows = 0
    for record in records:
        amount = parse_plain_amount(record.get(NET_AMOUNT_COLUMN))
        if record.get(TYPE_COLUMN) == PAYOUT_TYPE:
            payout_rows += 1
            payout_net += amount
        else:
            others_net += amount

    balance = payout_net + others_net
    currencies = collect_currencies(records)

    issues = []
    if payout_rows != 1:
        issues.append(f"Expected exactly 1 payout row, found {payout_rows}")
    if abs(balance) >= BALANCE_TOLERANCE:
        issues.append(f"Unbalanced: difference={balance:.2f}")
    if len(currencies) > 1:
        issues.append(f"Mixed currencies: {','.join(currencies)}")

    result = ReconciliationResult(
        ok=not issues,
        payout_amount=abs(payout_net),
        balance=balance,
        issues=issues,
    )
    if result.ok:
        logger.info(f"Reconciliation passed, payout amount {result.payout_amount:.2f}")
    else:
        logger.warning(f"Reconciliation failed: {'; '.join(issues)}")
    return result


def process_export(raw_text):
    """
    Run the whole pipeline over one export.

    Args:
        raw_text (str): Decoded export contents

    Returns:
        tuple: (payouts dict, ReconciliationResult, ParseResult)
    """
    parsed = parse_export(raw_text)
    payouts = build_payouts(parsed.records)
    check = check_payout_balance(parsed.records)
    return payouts, check, parsed


def resolve_output_dir(output):
    """Map the --output value to a directory; 'auto' means DATA_DIR/output."""
    if output is None:
        return None
    if output == 'auto':
        return ensure_directory('output')
    output_dir = pathlib.Path(output)
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def main(argv=None):
    """Main execution function."""
    try:
        parser = argparse.ArgumentParser(description='Break a marketplace transaction export down by payout')
        parser.add_argument('export', type=str,
                            help='Path to the transaction CSV export')
        parser.add_argument('--output', type=str, default=None,
                            help="Directory for the breakdown CSV and report ('auto' for DATA_DIR/output)")
        parser.add_argument('--payout', type=str, default=None,
                            help='Payout ID to show in detail')
        parser.add_argument('--debug', action='store_true',
                            help='Enable debug logging')
        parser.add_argument('--log-level', type=str, default='info',
                            help='Log level when --debug is not set')
        parser.add_argument('--log-file', type=str, default=None,
                            help='Log file path (overrides LOG_FILE)')
        args = parser.parse_args(argv)

        setup_logging(debug=args.debug, log_level=args.log_level, log_file=args.log_file)
        logger.info(f"Processing export {args.export}")

        raw_text = load_export(args.export)
        payouts, check, parsed = process_export(raw_text)
        if parsed.errors:
            logger.warning(f"{len(parsed.errors)} parse errors in {args.export}")

        lines = [format_status(payouts), '', format_payout_table(payouts), '', format_reconciliation(check)]
        if args.payout:
            if args.payout in payouts:
                lines.extend(['', format_payout_detail(payouts[args.payout])])
            else:
                lines.extend(['', f"Payout {args.payout} not found"])
        print('\n'.join(lines))

        output_dir = resolve_output_dir(args.output)
        if output_dir is not None:
            save_breakdown(payouts, output_dir)
            write_report(payouts, check, output_dir)

        return 0 if check.ok else 1

    except Exception as e:
        logger.error(f"Error processing export: {str(e)}")
        raise


if __name__ == '__main__':
    sys.exit(main())
