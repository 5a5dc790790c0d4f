from abc import ABC, abstractmethod
from typing import Sequence

from statement_scanner.domain.exceptions import StatementScannerError
from statement_scanner.domain.models import ExtractionResult, StatementDocument

PDF_MIME_TYPE = "application/pdf"


class ExtractionError(StatementScannerError):
    """Raised when a statement could not be turned into transactions."""
    pass

class MalformedResponseError(ExtractionError):
    """Raised when the extraction service answers with data we can't use."""
    pass


class ExtractionGateway(ABC):
    """
    Abstract base class for extraction services.

    A gateway turns one uploaded statement into raw transactions plus the
    statement period and (when printed on it) the statement total. It does
    not assign ids and does not apply categorization rules.
    """

    # MIME types this gateway can read
    supported_mime_types: Sequence[str] = (PDF_MIME_TYPE,)

    @abstractmethod
    def extract(
        self,
        document: StatementDocument,
        categories: Sequence[str] = (),
    ) -> ExtractionResult:
        """
        Extract transactions from a statement.

        Args:
            document: The uploaded statement
            categories: Category names the service should pick its guesses from

        Returns:
            The extracted transactions, period and statement total

        Raises:
            ExtractionError: If the service fails or answers with unusable data
        """
        pass

    def __repr__(self):
        return f"{self.__class__.__name__}()"
