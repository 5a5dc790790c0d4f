import uuid
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple, Union

from statement_scanner.categorization.registry import CategoryRegistry
from statement_scanner.categorization.rule_set import RuleSet
from statement_scanner.domain.enums import AppState
from statement_scanner.domain.exceptions import (
    InvalidFileTypeError,
    InvalidStateTransitionError,
    SessionBusyError,
)
from statement_scanner.domain.models import (
    CategoryColor,
    CategoryConfig,
    KeywordRule,
    RawTransaction,
    StatementDocument,
    Transaction,
)
from statement_scanner.gateway.base import PDF_MIME_TYPE, ExtractionGateway
from statement_scanner.gateway.factory import GatewayFactory
from statement_scanner.logging_setup import get_logger
from statement_scanner.services.models import StatementSummary, summarize
from statement_scanner.services.reconciliation import ReconciliationResult, reconcile
from statement_scanner.services.transaction_store import TransactionStore, search

logger = get_logger(__name__)

INVALID_FILE_MESSAGE = "Please upload a valid PDF file."
EXTRACTION_FAILED_MESSAGE = "Failed to process the statement. Please try again."

_TRANSITIONS: Dict[AppState, Set[AppState]] = {
    AppState.IDLE: {AppState.PROCESSING},
    AppState.PROCESSING: {AppState.ANALYZED, AppState.ERROR},
    AppState.ANALYZED: {AppState.IDLE},
    AppState.ERROR: {AppState.IDLE},
}


def assign_ids(raw_transactions: Sequence[RawTransaction]) -> List[Transaction]:
    """Give each extracted record a fresh id, unique within the statement"""
    batch = uuid.uuid4().hex[:12]
    return [
        Transaction.from_raw(raw, f"tx-{index}-{batch}")
        for index, raw in enumerate(raw_transactions)
    ]


class ScannerSession:
    """
    Application state for one scanning session.

    Owns the rule set and category registry (which survive statement
    reloads) and the transaction store (which holds one statement at a time).
    All state changes go through the methods below.

    State machine:
        IDLE -> PROCESSING -> ANALYZED -> (reset) -> IDLE
                           -> ERROR    -> (retry) -> IDLE

    Usage:
        session = ScannerSession(rule_set=RuleSet.from_config(),
                                 categories=CategoryRegistry.from_config())
        session.upload(Path("statement.pdf"))
        if session.state == AppState.ANALYZED:
            rows = session.visible_transactions()
    """

    def __init__(
        self,
        rule_set: Optional[RuleSet] = None,
        categories: Optional[CategoryRegistry] = None,
        gateway: Optional[ExtractionGateway] = None,
        store: Optional[TransactionStore] = None,
    ):
        self.rule_set = rule_set if rule_set is not None else RuleSet()
        self.categories = categories if categories is not None else CategoryRegistry()
        self.store = store if store is not None else TransactionStore()
        self._gateway = gateway

        self._state = AppState.IDLE
        self.filename = ""
        self.search_text = ""
        self.error_message = ""

    @property
    def gateway(self) -> ExtractionGateway:
        """Lazy-load the default gateway"""
        if self._gateway is None:
            self._gateway = GatewayFactory.create_gateway()
        return self._gateway

    @property
    def state(self) -> AppState:
        return self._state

    def _transition(self, target: AppState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise InvalidStateTransitionError(self._state, target)
        logger.debug("Session state %s -> %s", self._state.value, target.value)
        self._state = target

    # ---- Statement lifecycle ---------------------------------------------

    def upload(self, source: Union[StatementDocument, Path, str]) -> AppState:
        """
        Extract and load a statement.

        The file type is checked before the gateway is called. Any failure
        inside the gateway is logged and turns into the ERROR state with a
        generic message; it is never raised from here.

        Args:
            source: An uploaded document, or a path to read one from

        Returns:
            The resulting state (ANALYZED or ERROR)

        Raises:
            SessionBusyError: If an extraction is already in flight
            InvalidStateTransitionError: If the session is not IDLE
            InvalidFileTypeError: If the document is not a PDF (state stays IDLE)
            FileNotFoundError: If a path was given and doesn't exist
        """
        if self._state == AppState.PROCESSING:
            raise SessionBusyError(self._state, AppState.PROCESSING)
        if self._state != AppState.IDLE:
            raise InvalidStateTransitionError(self._state, AppState.PROCESSING)

        document = source if isinstance(source, StatementDocument) else StatementDocument.from_path(source)

        if document.mime_type != PDF_MIME_TYPE:
            self.error_message = INVALID_FILE_MESSAGE
            raise InvalidFileTypeError(
                f"{INVALID_FILE_MESSAGE} Got {document.mime_type or 'unknown type'} for {document.filename}"
            )

        self._transition(AppState.PROCESSING)
        self.filename = document.filename
        self.error_message = ""

        try:
            result = self.gateway.extract(document, self.categories.names)
            transactions = assign_ids(result.transactions)
        except Exception:
            logger.exception("Extraction failed for %s", document.filename)
            self.error_message = EXTRACTION_FAILED_MESSAGE
            self._transition(AppState.ERROR)
            return self._state

        self.store.load(transactions, result.period, result.statement_total)
        self._transition(AppState.ANALYZED)
        logger.info(
            "Analyzed %s: %d transactions, reported total %s",
            document.filename,
            len(transactions),
            result.statement_total,
        )
        return self._state

    def reset(self) -> None:
        """
        Discard the loaded statement (ANALYZED -> IDLE).

        Rules and categories are kept.
        """
        self._transition(AppState.IDLE)
        self.store.clear()
        self.filename = ""
        self.search_text = ""
        self.error_message = ""

    def retry(self) -> None:
        """Acknowledge a failed extraction (ERROR -> IDLE)"""
        self._transition(AppState.IDLE)
        self.store.clear()
        self.filename = ""
        self.search_text = ""
        self.error_message = ""

    # ---- Views -----------------------------------------------------------

    def resolved_transactions(self) -> Tuple[Transaction, ...]:
        """Every transaction of the statement, with effective categories"""
        return self.store.resolved(self.rule_set)

    def visible_transactions(self) -> Tuple[Transaction, ...]:
        """Resolved transactions narrowed by the current search text"""
        return search(self.resolved_transactions(), self.search_text)

    def summary(self) -> StatementSummary:
        """Category breakdown over the visible transactions"""
        return summarize(self.visible_transactions(), self.store.period)

    def reconciliation(self) -> ReconciliationResult:
        """Check the whole statement against its reported total"""
        return reconcile(self.resolved_transactions(), self.store.reported_total)

    def set_search(self, text: str) -> None:
        self.search_text = text or ""

    # ---- Corrections -----------------------------------------------------

    def set_manual_category(self, transaction_id: str, category: Optional[str]) -> bool:
        return self.store.set_manual_category(transaction_id, category)

    def add_rule(self, keyword: str, category: str, position: Optional[int] = None) -> KeywordRule:
        rule = KeywordRule.create(keyword, category)
        self.rule_set.add(rule, position=position)
        return rule

    def update_rule(self, rule: KeywordRule) -> bool:
        return self.rule_set.update(rule)

    def delete_rule(self, rule_id: str) -> bool:
        return self.rule_set.delete(rule_id)

    def add_category(self, name: str) -> Optional[CategoryConfig]:
        return self.categories.add_category(name)

    def set_category_color(self, name: str, color: Union[CategoryColor, str]) -> bool:
        return self.categories.set_color(name, color)

    def __repr__(self) -> str:
        return f"ScannerSession(state={self._state.value}, {len(self.store)} transactions, {self.rule_set!r})"
