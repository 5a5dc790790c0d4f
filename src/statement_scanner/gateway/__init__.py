from statement_scanner.gateway.base import (
    PDF_MIME_TYPE,
    ExtractionError,
    ExtractionGateway,
    MalformedResponseError,
)
from statement_scanner.gateway.factory import GatewayFactory
from statement_scanner.gateway.payload import parse_extraction_payload

__all__ = [
    "PDF_MIME_TYPE",
    "ExtractionError",
    "ExtractionGateway",
    "MalformedResponseError",
    "GatewayFactory",
    "parse_extraction_payload",
]
