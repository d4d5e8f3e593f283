"""
Data models for the payout breakdown.

Records coming out of the parser are plain read-only mappings; everything
derived from them lives in the dataclasses below.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping


class RowKind(str, Enum):
    """Semantic category of a ledger row."""
    PAYOUT = "payout"
    SALE = "sale"
    FEE = "fee"
    ADJUSTMENT = "adjustment"


@dataclass(frozen=True)
class ClassifiedRow:
    """
    A breakdown row attributed to a payout.

    Attributes:
        kind: sale, fee or adjustment (never payout)
        type_raw: Type label exactly as exported (trimmed)
        order_number: Order number, may be empty
        item_title: Item title, may be empty
        description: Row description, may be empty
        net_amount: Signed net amount
        date: Resolved row date, "--" when nothing usable was found
    """
    kind: RowKind
    type_raw: str
    order_number: str
    item_title: str
    description: str
    net_amount: float
    date: str


@dataclass
class PayoutSummary:
    """Per-category totals of a payout's breakdown rows."""
    sales_total: float = 0.0
    fees_total: float = 0.0
    adjustments_total: float = 0.0
    row_count: int = 0

    @property
    def breakdown_total(self) -> float:
        return self.sales_total + self.fees_total + self.adjustments_total


@dataclass
class PayoutGroup:
    """
    All rows sharing one payout identifier.

    payout_amount is only meaningful once the aggregator has finalized the
    group: the declared transfer total when marker rows exist, otherwise the
    sum of the breakdown.
    """
    payout_id: str
    payout_date: str = ""
    currency: str = "USD"
    payout_amount: float = 0.0
    summary: PayoutSummary = field(default_factory=PayoutSummary)
    rows: List[ClassifiedRow] = field(default_factory=list)


@dataclass
class ParseResult:
    """Records read from an export plus any parse problems met on the way."""
    records: List[Mapping[str, str]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)


@dataclass
class ReconciliationResult:
    """
    Outcome of the balance check over a whole export.

    Attributes:
        ok: True when there is exactly one payout row, the balance is zero
            within a cent and at most one currency is present
        payout_amount: Absolute value of the payout rows' net total
        balance: Payout rows' net total plus every other row's net total
        issues: One message per failed condition, in check order
    """
    ok: bool
    payout_amount: float
    balance: float
    issues: List[str] = field(default_factory=list)
