import random
import pytest
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

from statement_scanner.categorization.registry import CategoryRegistry
from statement_scanner.categorization.rule_set import RuleSet
from statement_scanner.domain.models import (
    ExtractionResult,
    KeywordRule,
    Period,
    RawTransaction,
    Transaction,
)
from statement_scanner.gateway.base import ExtractionGateway


class StubGateway(ExtractionGateway):
    """Gateway double that returns a canned result or raises a canned error"""

    def __init__(self, result: Optional[ExtractionResult] = None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls = []

    def extract(self, document, categories=()):
        self.calls.append((document, tuple(categories)))
        if self.error is not None:
            raise self.error
        return self.result


def make_transaction(
    description: str = "COFFEE SHOP",
    amount: str = "4.50",
    category: str = "Dining",
    id: str = "tx-1",
    card_last4: Optional[str] = None,
    manual_category: Optional[str] = None,
    date: str = "Jan. 10",
) -> Transaction:
    return Transaction(
        id=id,
        date=date,
        description=description,
        amount=Decimal(amount),
        category=category,
        card_last4=card_last4,
        original_category=category,
        manual_category=manual_category,
    )


@pytest.fixture
def sample_transactions() -> List[Transaction]:
    """A small statement: two purchases on different cards and a payment"""
    return [
        make_transaction(
            id="tx-0", description="NETFLIX.COM BILLING", amount="16.99",
            category="Online Services", card_last4="0547",
        ),
        make_transaction(
            id="tx-1", description="LOBLAWS #1021", amount="136.21",
            category="Groceries", card_last4="8812",
        ),
        make_transaction(
            id="tx-2", description="PAYMENT THANK YOU", amount="-250.00",
            category="Other",
        ),
    ]


@pytest.fixture
def rule_set() -> RuleSet:
    return RuleSet([
        KeywordRule(id="r1", keyword="netflix", category="Entertainment"),
        KeywordRule(id="r2", keyword="esso", category="Gas"),
    ])


@pytest.fixture
def registry() -> CategoryRegistry:
    """Registry seeded from the packaged defaults, with a fixed random source"""
    return CategoryRegistry.from_config(rng=random.Random(7))


@pytest.fixture
def extraction_result() -> ExtractionResult:
    return ExtractionResult(
        transactions=(
            RawTransaction(date="Jan. 10", description="NETFLIX.COM BILLING",
                           amount=Decimal("16.99"), category="Online Services", card_last4="0547"),
            RawTransaction(date="Jan. 12", description="LOBLAWS #1021",
                           amount=Decimal("136.21"), category="Groceries"),
            RawTransaction(date="Jan. 15", description="PAYMENT THANK YOU",
                           amount=Decimal("-250.00"), category="Other"),
        ),
        period=Period(start="Dec. 26", end="Jan. 19"),
        statement_total=Decimal("153.20"),
    )


@pytest.fixture
def stub_gateway(extraction_result) -> StubGateway:
    return StubGateway(result=extraction_result)


@pytest.fixture
def failing_gateway() -> StubGateway:
    return StubGateway(error=RuntimeError("quota exceeded"))


@pytest.fixture
def sample_pdf_file(tmp_path) -> Path:
    """A file that is a PDF as far as upload validation is concerned"""
    path = tmp_path / "statement.pdf"
    path.write_bytes(b"%PDF-1.4\n%fake statement\n")
    return path


@pytest.fixture
def sample_text_file(tmp_path) -> Path:
    path = tmp_path / "statement.txt"
    path.write_text("not a statement")
    return path


@pytest.fixture
def make_txn():
    """Factory for transactions with sensible defaults"""
    return make_transaction


@pytest.fixture
def gateway_returning():
    """Factory for gateway doubles: gateway_returning(result=..., error=...)"""
    return StubGateway
