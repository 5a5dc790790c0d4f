from abc import ABC, abstractmethod
from typing import Optional

from statement_scanner.domain.models import Transaction

class CategorizationRule(ABC):
    """
    Abstract base class for all categorization rules.

    Implements Chain of Responsibility:
    - Each rule tries to categorize a transaction
    - If it can't it passes to the next rule
    - Rules are tried in priority order

    Usage:
        Create chain: manual override -> keyword rules -> AI baseline
        ```
        manual = ManualOverrideRule()
        keywords = KeywordMatchRule(rule_set)
        baseline = BaselineRule()

        manual.set_next(keywords).set_next(baseline)

        category = manual.categorize(transaction)
        ```
    """

    # Short label for the resolution step this rule represents
    source: str = ""

    def __init__(self):
        self._next_rule: Optional['CategorizationRule'] = None


    def set_next(self, rule: 'CategorizationRule') -> 'CategorizationRule':
        """
        Set the next rule in the chain.

        Args:
            rule: The next rule to try if this one doesn't match

        Returns:
            The rule that was set (for chaining)

        Example:
            `rule1.set_next(rule2).set_next(rule3)`
        """
        self._next_rule = rule
        return rule

    @property
    def next_rule(self) -> Optional['CategorizationRule']:
        return self._next_rule

    @abstractmethod
    def _matches(self, transaction: Transaction) -> bool:
        """
        Check if this rule matches the transaction.

        Args:
            transaction: Transaction to check

        Returns:
            True if this rule can categorize this transaction
        """
        pass


    @abstractmethod
    def _get_category(self, transaction: Transaction) -> str:
        """
        Get the category for the transaction.

        Called only if _matches() returns True.
        """
        pass


    def handler_for(self, transaction: Transaction) -> Optional['CategorizationRule']:
        """Return the first rule in the chain (starting here) that matches"""
        if self._matches(transaction):
            return self

        if self._next_rule:
            return self._next_rule.handler_for(transaction)

        return None

    def categorize(self, transaction: Transaction) -> Optional[str]:
        """
        Attempt to categorize a transaction.

        Args:
            Transaction to categorize.

        Returns:
            Category name, or None if no rules matched
        """
        handler = self.handler_for(transaction)
        if handler is None:
            return None
        return handler._get_category(transaction)

    def __repr__(self):
        return f"{self.__class__.__name__}()"
