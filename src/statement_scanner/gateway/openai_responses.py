"""Statement extraction through the OpenAI Responses API.

The PDF is sent inline as a base64 ``input_file`` together with a strict JSON
schema, so the model answers with a single JSON object that
:func:`statement_scanner.gateway.payload.parse_extraction_payload` converts
into domain records. Authentication uses ``OPENAI_API_KEY`` (read by the SDK).

One request per statement: no retries, no streaming.
"""

from __future__ import annotations

import base64
import json
from collections.abc import Mapping, Sequence
from typing import Any

from openai import OpenAI, OpenAIError

from statement_scanner.domain.models import ExtractionResult, StatementDocument
from statement_scanner.gateway.base import (
    PDF_MIME_TYPE,
    ExtractionError,
    ExtractionGateway,
    MalformedResponseError,
)
from statement_scanner.gateway.payload import parse_extraction_payload
from statement_scanner.logging_setup import get_logger

logger = get_logger(__name__)

DEFAULT_MODEL = "gpt-4.1"

SYSTEM_INSTRUCTIONS = (
    "You are a precise data extraction engine. You extract financial data from PDF "
    "statements accurately. Rely on the text layer of the PDF for exact extraction."
)

USER_PROMPT = (
    "Analyze this credit card statement. Extract all transactions into a structured "
    "JSON format. Infer the category based on the merchant name. Ensure amounts are "
    "numbers (positive for spend)."
)


def build_response_format(categories: Sequence[str]) -> dict[str, Any]:
    """Return the strict JSON schema ``text.format`` object for one request.

    Strict mode requires every property to be listed as required, so optional
    values are expressed as nullable types instead.
    """

    category_hint = "Best fit category"
    if categories:
        category_hint += ": " + ", ".join(categories)

    return {
        "type": "json_schema",
        "name": "statement_extraction",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {
                "transactions": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "date": {
                                "type": "string",
                                "description": "Transaction date in Format MMM DD (e.g. Jan. 10)",
                            },
                            "description": {
                                "type": "string",
                                "description": "Merchant name or transaction description",
                            },
                            "card_last4": {
                                "type": ["string", "null"],
                                "description": "Last 4 digits of the card used, if visible. Null if not.",
                            },
                            "amount": {
                                "type": "number",
                                "description": (
                                    "Transaction amount. Positive for expenses/purchases. "
                                    "Negative for payments/refunds."
                                ),
                            },
                            "category": {"type": "string", "description": category_hint},
                        },
                        "required": ["date", "description", "card_last4", "amount", "category"],
                        "additionalProperties": False,
                    },
                },
                "start_date": {
                    "type": ["string", "null"],
                    "description": "Start date of the statement period (e.g., Dec. 26)",
                },
                "end_date": {
                    "type": ["string", "null"],
                    "description": "End date of the statement period (e.g., Jan. 19)",
                },
                "statement_total": {
                    "type": ["number", "null"],
                    "description": (
                        "The 'Total New Charges', 'Total Purchases', or similar total amount "
                        "listed in the statement summary section. Do not include previous balance."
                    ),
                },
            },
            "required": ["transactions", "start_date", "end_date", "statement_total"],
            "additionalProperties": False,
        },
    }


def build_input(document: StatementDocument) -> list[dict[str, Any]]:
    """Build the user message carrying the PDF and the extraction prompt."""

    encoded = base64.b64encode(document.data).decode("ascii")
    return [
        {
            "role": "user",
            "content": [
                {
                    "type": "input_file",
                    "filename": document.filename,
                    "file_data": f"data:{PDF_MIME_TYPE};base64,{encoded}",
                },
                {"type": "input_text", "text": USER_PROMPT},
            ],
        }
    ]


def extract_response_json(resp: Any) -> Mapping[str, Any]:
    """Decode the JSON object from a Responses SDK result.

    Prefers ``resp.output_text``; falls back to ``resp.output[0].content[0].text``.

    Raises
    ------
    MalformedResponseError
        If no text can be located or it is not a JSON object.
    """

    text: str | None = getattr(resp, "output_text", None)
    if not text:
        output = getattr(resp, "output", None)
        first = output[0] if output else None
        content = getattr(first, "content", None)
        if content:
            candidate = getattr(content[0], "text", None)
            text = candidate if isinstance(candidate, str) else None
    if not text or not isinstance(text, str):
        raise MalformedResponseError("Unexpected Responses API shape; unable to locate text output")

    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError("Extraction response is not valid JSON") from e

    if not isinstance(decoded, Mapping):
        raise MalformedResponseError("Extraction response is not a JSON object")
    return decoded


class OpenAIExtractionGateway(ExtractionGateway):
    """
    Extraction gateway backed by an OpenAI model that reads PDFs.

    Example:
        gateway = OpenAIExtractionGateway(model="gpt-4.1")
        result = gateway.extract(StatementDocument.from_path("statement.pdf"))
    """

    def __init__(self, model: str = DEFAULT_MODEL, client: OpenAI | None = None):
        """
        Args:
            model: Model name for the Responses API
            client: Optional pre-built client (tests pass a stub here)
        """
        self.model = model
        self._client = client

    @property
    def client(self) -> OpenAI:
        """Lazy-load the SDK client"""
        if self._client is None:
            self._client = OpenAI()
        return self._client

    def extract(
        self,
        document: StatementDocument,
        categories: Sequence[str] = (),
    ) -> ExtractionResult:
        logger.info(
            "extract:request filename=%s bytes=%d model=%s",
            document.filename,
            len(document.data),
            self.model,
        )

        try:
            resp = self.client.responses.create(
                model=self.model,
                instructions=SYSTEM_INSTRUCTIONS,
                input=build_input(document),
                text={"format": build_response_format(categories)},
            )
        except OpenAIError as e:
            raise ExtractionError(f"OpenAI request failed: {e}") from e

        result = parse_extraction_payload(extract_response_json(resp))
        logger.info(
            "extract:done filename=%s transactions=%d total=%s",
            document.filename,
            len(result.transactions),
            result.statement_total,
        )
        return result

    def __repr__(self) -> str:
        return f"OpenAIExtractionGateway(model='{self.model}')"
