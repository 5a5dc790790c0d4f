"""
Service layer models - DTOs for service operations.

These models represent the results of service operations, not domain entities.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from statement_scanner.domain.models import Period, Transaction


@dataclass(frozen=True)
class CategoryBreakdown:
    """Spending in one category and its share of the total"""
    category: str
    amount: Decimal
    percentage: float


@dataclass
class StatementSummary:
    """
    Summary of a set of resolved transactions.

    Aggregates spending per category for the analysis view. Only expenses
    (positive amounts) count toward spend; credits are listed but not summed.
    """

    period: Period = field(default_factory=Period)
    transactions: List[Transaction] = field(default_factory=list)

    @property
    def expenses(self) -> List[Transaction]:
        return [t for t in self.transactions if t.is_expense]

    @property
    def credits(self) -> List[Transaction]:
        return [t for t in self.transactions if not t.is_expense]

    @property
    def total_spend(self) -> Decimal:
        """Total amount spent (positive amounts only)"""
        return sum((t.amount for t in self.expenses), Decimal("0"))

    @property
    def total_credits(self) -> Decimal:
        """Payments and refunds, as a positive number"""
        return -sum((t.amount for t in self.credits), Decimal("0"))

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)

    @property
    def spend_by_category(self) -> Dict[str, Decimal]:
        totals: Dict[str, Decimal] = defaultdict(Decimal)
        for txn in self.expenses:
            totals[txn.category] += txn.amount
        return dict(totals)

    @property
    def breakdown(self) -> List[CategoryBreakdown]:
        """Categories sorted by spending amount (descending)"""
        total = self.total_spend
        rows = [
            CategoryBreakdown(
                category=category,
                amount=amount,
                percentage=float(amount / total * 100) if total > 0 else 0.0,
            )
            for category, amount in self.spend_by_category.items()
        ]
        return sorted(rows, key=lambda row: row.amount, reverse=True)

    def __str__(self) -> str:
        """Human-readable summary"""
        lines = [
            f"Statement Summary - {self.period}",
            "",
            f"Transactions: {self.transaction_count}",
            f"  Spend:   ${self.total_spend:,.2f} ({len(self.expenses)} transactions)",
            f"  Credits: ${self.total_credits:,.2f} ({len(self.credits)} transactions)",
        ]

        if self.breakdown:
            lines.append("\nSpending by Category:")
            for row in self.breakdown:
                lines.append(f"  • {row.category}: ${row.amount:,.2f} ({row.percentage:.1f}%)")

        return "\n".join(lines)


def summarize(transactions: Sequence[Transaction], period: Optional[Period] = None) -> StatementSummary:
    """Build a summary over already-resolved transactions"""
    return StatementSummary(period=period or Period(), transactions=list(transactions))
