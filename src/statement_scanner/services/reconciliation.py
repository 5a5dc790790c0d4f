"""
Cross-check of extracted transactions against the statement's own total.

Only expenses (positive amounts) count; payments and refunds are left out.
The tolerance absorbs rounding and formatting noise from the extraction.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from statement_scanner.domain.models import Transaction

RECONCILIATION_TOLERANCE = Decimal("1.0")


@dataclass(frozen=True)
class ReconciliationResult:
    computed_total: Decimal
    reported_total: Optional[Decimal]
    reconciled: bool

    @property
    def difference(self) -> Optional[Decimal]:
        if self.reported_total is None:
            return None
        return self.computed_total - self.reported_total


def total_spend(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of expense amounts"""
    return sum((t.amount for t in transactions if t.amount > 0), Decimal("0"))


def is_reconciled(
    transactions: Iterable[Transaction],
    reported_total: Optional[Decimal],
) -> bool:
    """
    True iff a total was reported and the expenses add up to within the tolerance.

    The difference must be strictly less than the tolerance.
    """
    if reported_total is None:
        return False
    return abs(total_spend(transactions) - Decimal(reported_total)) < RECONCILIATION_TOLERANCE


def reconcile(
    transactions: Iterable[Transaction],
    reported_total: Optional[Decimal],
) -> ReconciliationResult:
    transactions = list(transactions)
    return ReconciliationResult(
        computed_total=total_spend(transactions),
        reported_total=reported_total,
        reconciled=is_reconciled(transactions, reported_total),
    )
