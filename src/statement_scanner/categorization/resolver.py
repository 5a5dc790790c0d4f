"""
Effective category resolution.

Precedence, strictly in this order:
1. Manual override on the transaction
2. First keyword rule (in rule set order) found in the description
3. The category proposed at extraction time

Everything here is pure: nothing is cached and inputs are never mutated,
so callers recompute whenever rules or overrides change.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional

from statement_scanner.categorization.base import CategorizationRule
from statement_scanner.categorization.rule_set import RuleSet
from statement_scanner.categorization.rules import (
    BaselineRule,
    KeywordMatchRule,
    ManualOverrideRule,
)
from statement_scanner.domain.models import KeywordRule, Transaction


@dataclass(frozen=True)
class Resolution:
    """How a transaction got its effective category"""
    category: str
    source: str # "manual", "rule" or "ai"
    rule: Optional[KeywordRule] = None


def build_chain(rule_set: RuleSet) -> CategorizationRule:
    """Build the chain of responsibility for one rule set"""
    chain = ManualOverrideRule()
    chain.set_next(KeywordMatchRule(rule_set)).set_next(BaselineRule())
    return chain


def describe_resolution(transaction: Transaction, rule_set: RuleSet) -> Resolution:
    """Resolve a transaction and report which step decided it"""
    handler = build_chain(rule_set).handler_for(transaction)

    # BaselineRule always matches
    assert handler is not None, "Rule chain should never return None"

    rule = handler.matching_rule(transaction) if isinstance(handler, KeywordMatchRule) else None
    return Resolution(
        category=handler._get_category(transaction),
        source=handler.source,
        rule=rule,
    )


def resolve(transaction: Transaction, rule_set: RuleSet) -> str:
    """
    Compute the effective category of a transaction.

    Example:
        ```
        >>> rules = RuleSet([KeywordRule.create("netflix", "Entertainment")])
        >>> resolve(txn, rules)
        'Entertainment'
        ```
    """
    category = build_chain(rule_set).categorize(transaction)

    assert category is not None, "Rule chain should never return None"

    return category


def resolve_many(
    transactions: Iterable[Transaction],
    rule_set: RuleSet,
) -> List[Transaction]:
    """
    Resolve every transaction independently.

    Returns:
        New transaction records whose `category` is the effective category.
        `original_category` and `manual_category` are carried over untouched.
    """
    chain = build_chain(rule_set)
    resolved = []
    for txn in transactions:
        category = chain.categorize(txn)
        resolved.append(txn if category == txn.category else txn.with_category(category))
    return resolved
