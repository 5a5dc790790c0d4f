import mimetypes
import uuid
from dataclasses import dataclass, field, replace
from decimal import Decimal
from pathlib import Path
from typing import Optional, Tuple

from statement_scanner.domain.enums import TransactionType

UNKNOWN_PERIOD = "Unknown"


@dataclass(frozen=True)
class RawTransaction:
    """A transaction as returned by the extraction service, before it gets an id"""
    date: str
    description: str
    amount: Decimal
    category: str
    card_last4: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Core domain model representing a single statement line"""
    id: str
    date: str
    description: str
    amount: Decimal
    category: str
    card_last4: Optional[str] = None
    original_category: Optional[str] = None
    manual_category: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: RawTransaction, transaction_id: str) -> "Transaction":
        """Build a transaction from an extracted record, keeping the AI guess as baseline"""
        return cls(
            id=transaction_id,
            date=raw.date,
            description=raw.description,
            amount=raw.amount,
            category=raw.category,
            card_last4=raw.card_last4,
            original_category=raw.category,
        )

    @property
    def is_expense(self) -> bool:
        """Positive amounts are purchases"""
        return self.amount > 0

    @property
    def type(self) -> TransactionType:
        return TransactionType.EXPENSE if self.is_expense else TransactionType.CREDIT

    def with_manual_category(self, category: Optional[str]) -> "Transaction":
        """Return a copy with the override set (or cleared when category is empty)"""
        return replace(self, manual_category=category or None)

    def with_category(self, category: str) -> "Transaction":
        """Return a copy carrying a different effective category"""
        return replace(self, category=category)

    def __repr__(self):
        sign = "-" if self.type == TransactionType.CREDIT else "+"
        return f"Transaction({self.date}, {self.description[:30]}, {sign}${abs(self.amount)})"


@dataclass(frozen=True)
class KeywordRule:
    """
    User-defined substring -> category mapping.

    The keyword is matched case-insensitively anywhere in the description,
    without word boundaries.
    """
    id: str
    keyword: str
    category: str

    def __post_init__(self):
        if not self.keyword:
            raise ValueError("Keyword rule needs a non-empty keyword")

    @classmethod
    def create(cls, keyword: str, category: str) -> "KeywordRule":
        """Create a rule with a freshly generated id"""
        return cls(id=uuid.uuid4().hex, keyword=keyword, category=category)

    def matches(self, description: str) -> bool:
        if not description:
            return False
        return self.keyword.lower() in description.lower()


@dataclass(frozen=True)
class CategoryColor:
    """Display styles for one palette entry. Opaque to the categorization logic."""
    id: str
    bg: str
    text: str
    border: str
    fill: str


@dataclass(frozen=True)
class CategoryConfig:
    name: str
    color: CategoryColor


@dataclass(frozen=True)
class Period:
    """Date range covered by a statement, as printed on it"""
    start: str = UNKNOWN_PERIOD
    end: str = UNKNOWN_PERIOD

    def __str__(self) -> str:
        return f"{self.start} - {self.end}"


@dataclass(frozen=True)
class ExtractionResult:
    """Structured output of the extraction gateway"""
    transactions: Tuple[RawTransaction, ...] = ()
    period: Period = field(default_factory=Period)
    statement_total: Optional[Decimal] = None


@dataclass(frozen=True)
class StatementDocument:
    """An uploaded statement file"""
    filename: str
    mime_type: Optional[str]
    data: bytes = field(repr=False)

    @classmethod
    def from_path(cls, filepath: Path | str) -> "StatementDocument":
        """
        Read a statement from disk.

        The MIME type is guessed from the file name, like a browser does for uploads.

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"File does not exist on path {path}")

        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(filename=path.name, mime_type=mime_type, data=path.read_bytes())
