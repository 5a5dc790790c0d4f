from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence, Tuple

from statement_scanner.categorization.resolver import resolve_many
from statement_scanner.categorization.rule_set import RuleSet
from statement_scanner.domain.models import Period, Transaction
from statement_scanner.logging_setup import get_logger

logger = get_logger(__name__)

TransactionPredicate = Callable[[Transaction], bool]


def amount_text(amount: Decimal) -> str:
    """
    Plain decimal text of an amount, as shown to the user when searching.

    Trailing zeros are dropped and no exponent is used: 45.50 -> "45.5",
    100.00 -> "100", -20 -> "-20".
    """
    text = format(amount.normalize(), "f")
    return "0" if text in ("-0", "0") else text


def matches_search(transaction: Transaction, search_text: str) -> bool:
    """
    The search predicate used by every list and summary view.

    A transaction matches when any of these contain the search text:
    - the description (case-insensitive)
    - the amount's plain decimal text
    - the card suffix
    An empty search matches everything. No special syntax, no regex.
    """
    if not search_text:
        return True

    if search_text.lower() in (transaction.description or "").lower():
        return True

    if search_text in amount_text(transaction.amount):
        return True

    return bool(transaction.card_last4) and search_text in transaction.card_last4


def search(transactions: Iterable[Transaction], search_text: str) -> Tuple[Transaction, ...]:
    """Apply `matches_search` to any sequence of transactions"""
    return tuple(t for t in transactions if matches_search(t, search_text))


@dataclass(frozen=True)
class _StatementSnapshot:
    transactions: Tuple[Transaction, ...] = ()
    period: Period = field(default_factory=Period)
    reported_total: Optional[Decimal] = None


class TransactionStore:
    """
    In-memory holder for the transactions of one loaded statement.

    State lives in a single immutable snapshot that is swapped as a whole,
    so a reader sees either the old statement or the new one, never a mix.
    Records are never edited in place: an override replaces the record.
    """

    def __init__(self):
        self._snapshot = _StatementSnapshot()
        self._version = 0

    def _swap(self, snapshot: _StatementSnapshot) -> None:
        self._snapshot = snapshot
        self._version += 1

    def load(
        self,
        transactions: Sequence[Transaction],
        period: Optional[Period] = None,
        reported_total: Optional[Decimal] = None,
    ) -> None:
        """
        Replace the whole collection, period and reported total.

        Nothing from a previous statement is kept.

        Raises:
            ValueError: If two transactions share an id
        """
        ids = [t.id for t in transactions]
        if len(set(ids)) != len(ids):
            raise ValueError("Transaction ids must be unique within a statement")

        self._swap(_StatementSnapshot(
            transactions=tuple(transactions),
            period=period or Period(),
            reported_total=reported_total,
        ))
        logger.debug("Loaded %d transactions (period %s)", len(ids), self.period)

    def clear(self) -> None:
        self._swap(_StatementSnapshot())

    @property
    def version(self) -> int:
        """Bumped on every change, usable as a cache key"""
        return self._version

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self._snapshot.transactions

    @property
    def period(self) -> Period:
        return self._snapshot.period

    @property
    def reported_total(self) -> Optional[Decimal]:
        return self._snapshot.reported_total

    def get(self, transaction_id: str) -> Optional[Transaction]:
        for txn in self._snapshot.transactions:
            if txn.id == transaction_id:
                return txn
        return None

    def set_manual_category(self, transaction_id: str, category: Optional[str]) -> bool:
        """
        Set (or with an empty category, clear) the override on one transaction.

        Returns:
            True if the transaction was found, False otherwise (no change)
        """
        current = self._snapshot
        updated = []
        found = False
        for txn in current.transactions:
            if txn.id == transaction_id:
                txn = txn.with_manual_category(category)
                found = True
            updated.append(txn)

        if not found:
            logger.debug("Ignoring override for unknown transaction %s", transaction_id)
            return False

        self._swap(_StatementSnapshot(
            transactions=tuple(updated),
            period=current.period,
            reported_total=current.reported_total,
        ))
        return True

    def clear_manual_category(self, transaction_id: str) -> bool:
        return self.set_manual_category(transaction_id, None)

    def filter(self, predicate: TransactionPredicate) -> Tuple[Transaction, ...]:
        """Read-only filtered view. Never mutates the store."""
        return tuple(t for t in self._snapshot.transactions if predicate(t))

    def resolved(self, rule_set: RuleSet) -> Tuple[Transaction, ...]:
        """All transactions with their effective categories"""
        return tuple(resolve_many(self._snapshot.transactions, rule_set))

    def __len__(self) -> int:
        return len(self._snapshot.transactions)

    def __repr__(self) -> str:
        return f"TransactionStore({len(self)} transactions, period={self.period})"
