class StatementScannerError(Exception):
    """Base class for all statement scanner errors."""
    pass

class InvalidFileTypeError(StatementScannerError, ValueError):
    """Raised when an uploaded file is not a PDF statement."""
    pass

class InvalidStateTransitionError(StatementScannerError):
    """Raised when the session is asked to move between incompatible states."""

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move from {current.value} to {target.value}"
        )

class SessionBusyError(InvalidStateTransitionError):
    """Raised when an upload is attempted while an extraction is in flight."""
    pass
