from typing import Optional

from statement_scanner.categorization.base import CategorizationRule
from statement_scanner.categorization.rule_set import RuleSet
from statement_scanner.domain.models import KeywordRule, Transaction


class ManualOverrideRule(CategorizationRule):
    """
    Highest priority: a category the user picked by hand.

    Wins regardless of any keyword rule until the override is cleared.
    """

    source = "manual"

    def _matches(self, transaction: Transaction) -> bool:
        return bool(transaction.manual_category)

    def _get_category(self, transaction: Transaction) -> str:
        return transaction.manual_category


class KeywordMatchRule(CategorizationRule):
    """
    Rule that matches the keywords of a RuleSet against descriptions.

    Features:
    - Case-insensitive substring matching, no word boundaries
    - First rule in RuleSet order wins
    - Empty descriptions never match

    Example:
        ```
        rule_set = RuleSet([KeywordRule.create("netflix", "Entertainment")])
        rule = KeywordMatchRule(rule_set)
        ```
    """

    source = "rule"

    def __init__(self, rule_set: RuleSet):
        super().__init__()
        self.rule_set = rule_set

    def matching_rule(self, transaction: Transaction) -> Optional[KeywordRule]:
        return self.rule_set.first_match(transaction.description)

    def _matches(self, transaction: Transaction) -> bool:
        return self.matching_rule(transaction) is not None

    def _get_category(self, transaction: Transaction) -> str:
        rule = self.matching_rule(transaction)
        if rule is None:
            # _matches must have made a whoopsie
            raise RuntimeError("_get_category called but no match found")
        return rule.category

    def __repr__(self):
        return f"KeywordMatchRule({len(self.rule_set)} keywords)"


class BaselineRule(CategorizationRule):
    """
    Fallback rule that always matches.

    Should be the last rule in the chain. Returns the category the
    extraction service proposed.
    """

    source = "ai"

    def _matches(self, _: Transaction) -> bool:
        """Always matches"""
        return True

    def _get_category(self, transaction: Transaction) -> str:
        return transaction.category
