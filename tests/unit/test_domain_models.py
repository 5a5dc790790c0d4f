import pytest
from dataclasses import FrozenInstanceError
from decimal import Decimal

from statement_scanner.domain.enums import TransactionType
from statement_scanner.domain.exceptions import InvalidStateTransitionError
from statement_scanner.domain.enums import AppState
from statement_scanner.domain.models import RawTransaction, StatementDocument, Transaction


@pytest.mark.unit
class TestTransaction:

    def test_from_raw_keeps_baseline(self):
        raw = RawTransaction(date="Jan. 10", description="ESSO 123", amount=Decimal("40.00"),
                             category="Gas", card_last4="0547")

        txn = Transaction.from_raw(raw, "tx-0-abc")

        assert txn.id == "tx-0-abc"
        assert txn.category == "Gas"
        assert txn.original_category == "Gas"
        assert txn.manual_category is None

    @pytest.mark.parametrize("amount,expected", [
        ("12.00", TransactionType.EXPENSE),
        ("-12.00", TransactionType.CREDIT),
        ("0", TransactionType.CREDIT),
    ])
    def test_type_follows_sign(self, make_txn, amount, expected):
        assert make_txn(amount=amount).type == expected

    def test_with_manual_category_returns_copy(self, make_txn):
        txn = make_txn()

        changed = txn.with_manual_category("Business")

        assert changed.manual_category == "Business"
        assert txn.manual_category is None

    def test_empty_manual_category_clears(self, make_txn):
        assert make_txn(manual_category="Business").with_manual_category("").manual_category is None

    def test_records_are_immutable(self, make_txn):
        with pytest.raises(FrozenInstanceError):
            make_txn().category = "Other"


@pytest.mark.unit
class TestStatementDocument:

    def test_from_path_guesses_pdf(self, sample_pdf_file):
        document = StatementDocument.from_path(sample_pdf_file)

        assert document.filename == "statement.pdf"
        assert document.mime_type == "application/pdf"
        assert document.data.startswith(b"%PDF")

    def test_from_path_text_file(self, sample_text_file):
        assert StatementDocument.from_path(sample_text_file).mime_type == "text/plain"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            StatementDocument.from_path(tmp_path / "missing.pdf")


@pytest.mark.unit
def test_transition_error_message():
    error = InvalidStateTransitionError(AppState.IDLE, AppState.ANALYZED)

    assert "IDLE" in str(error)
    assert "ANALYZED" in str(error)
