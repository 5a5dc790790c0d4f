from enum import Enum

class TransactionType(Enum):
    """Represents whether money is going out or coming back"""
    EXPENSE = "Expense" # purchases, positive amounts
    CREDIT = "Credit" # payments and refunds, negative amounts


class AppState(Enum):
    """Lifecycle of one scanning session"""
    IDLE = "IDLE"
    PROCESSING = "PROCESSING"
    ANALYZED = "ANALYZED"
    ERROR = "ERROR"
