"""
CSV export of resolved transactions.

The file opens cleanly in Excel: a UTF-8 byte order mark comes first and
the description column is always quoted.
"""
import time
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Optional

from statement_scanner.domain.models import Transaction

BOM = "\ufeff"
HEADERS = ["Date", "Description", "Card", "Category", "Amount"]


def quote_description(description: str) -> str:
    """Wrap in quotes, doubling internal quotes and flattening newlines"""
    text = (description or "").replace('"', '""').replace("\r\n", " ").replace("\n", " ")
    return f'"{text}"'


def format_amount(amount: Decimal) -> str:
    return f"{amount:.2f}"


def to_row(transaction: Transaction) -> str:
    return ",".join([
        transaction.date,
        quote_description(transaction.description),
        transaction.card_last4 or "",
        transaction.category,
        format_amount(transaction.amount),
    ])


def to_csv(transactions: Iterable[Transaction]) -> str:
    """
    Render already-resolved transactions as CSV text.

    Categories are written as they are on the records, so pass the output
    of the resolver, not the raw store contents.
    """
    lines = [",".join(HEADERS)]
    lines.extend(to_row(t) for t in transactions)
    return BOM + "\n".join(lines)


def default_export_filename(now: Optional[float] = None) -> str:
    millis = int((time.time() if now is None else now) * 1000)
    return f"statement_export_{millis}.csv"


def write_csv(filepath: Path | str, transactions: Iterable[Transaction]) -> Path:
    """
    Write the CSV export to disk.

    Returns:
        The path written to
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_csv(transactions), encoding="utf-8", newline="")
    return path
