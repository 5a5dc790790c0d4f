"""
Conversion of decoded extraction responses into domain records.

Expected shape:
    {
        "transactions": [
            {"date": "Jan. 10", "description": "NETFLIX.COM", "card_last4": "0547",
             "amount": 16.99, "category": "Entertainment"}
        ],
        "start_date": "Dec. 26",
        "end_date": "Jan. 19",
        "statement_total": 153.20
    }

Optional fields (card suffix, period, total) may be missing or null.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from statement_scanner.domain.models import (
    UNKNOWN_PERIOD,
    ExtractionResult,
    Period,
    RawTransaction,
)
from statement_scanner.gateway.base import MalformedResponseError

REQUIRED_TRANSACTION_FIELDS = ("date", "description", "amount", "category")


def _to_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool):
        raise MalformedResponseError(f"'{field_name}' must be a number, got {value!r}")
    try:
        result = Decimal(str(value).replace("$", "").replace(",", "").strip())
    except (InvalidOperation, ValueError) as e:
        raise MalformedResponseError(f"'{field_name}' must be a number, got {value!r}") from e

    # NaN and Infinity parse fine but break every comparison downstream
    if not result.is_finite():
        raise MalformedResponseError(f"'{field_name}' must be a finite number, got {value!r}")
    return result


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_raw_transaction(record: Any, index: int) -> RawTransaction:
    """
    Convert one transaction record.

    Raises:
        MalformedResponseError: If the record isn't an object or lacks a required field
    """
    if not isinstance(record, Mapping):
        raise MalformedResponseError(f"Transaction {index} is not an object")

    missing = [f for f in REQUIRED_TRANSACTION_FIELDS if record.get(f) is None]
    if missing:
        raise MalformedResponseError(
            f"Transaction {index} is missing required fields: {', '.join(missing)}"
        )

    return RawTransaction(
        date=str(record["date"]),
        description=str(record["description"]),
        amount=_to_decimal(record["amount"], "amount"),
        category=str(record["category"]),
        card_last4=_optional_text(record.get("card_last4", record.get("cardLast4"))),
    )


def parse_extraction_payload(payload: Any) -> ExtractionResult:
    """
    Convert a decoded response into an ExtractionResult.

    Raises:
        MalformedResponseError: If the payload lacks the transaction array or
            contains records that can't be converted
    """
    if not isinstance(payload, Mapping):
        raise MalformedResponseError("Extraction response is not an object")

    records = payload.get("transactions")
    if not isinstance(records, list):
        raise MalformedResponseError("Extraction response has no transaction array")

    transactions = tuple(
        parse_raw_transaction(record, index) for index, record in enumerate(records)
    )

    total = payload.get("statement_total", payload.get("statementTotal"))

    return ExtractionResult(
        transactions=transactions,
        period=Period(
            start=_optional_text(payload.get("start_date", payload.get("startDate"))) or UNKNOWN_PERIOD,
            end=_optional_text(payload.get("end_date", payload.get("endDate"))) or UNKNOWN_PERIOD,
        ),
        statement_total=None if total is None else _to_decimal(total, "statement_total"),
    )
