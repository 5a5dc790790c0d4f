"""
Categorization system for statement transactions.

Resolves each transaction's effective category with a chain of
responsibility: manual override -> keyword rules -> AI baseline.

Quick Start:
    >>> from statement_scanner.categorization import RuleSet, resolve
    >>>
    >>> rules = RuleSet.from_config()
    >>> category = resolve(transaction, rules)
    >>> print(f"Categorized as: {category}")
"""
from statement_scanner.categorization.base import CategorizationRule
from statement_scanner.categorization.palette import COLOR_PALETTE, FALLBACK_COLOR
from statement_scanner.categorization.registry import CategoryRegistry
from statement_scanner.categorization.resolver import (
    Resolution,
    describe_resolution,
    resolve,
    resolve_many,
)
from statement_scanner.categorization.rule_set import RuleSet
from statement_scanner.categorization.rules import (
    BaselineRule,
    KeywordMatchRule,
    ManualOverrideRule,
)

__all__ = [
    "CategorizationRule",
    "ManualOverrideRule",
    "KeywordMatchRule",
    "BaselineRule",
    "RuleSet",
    "CategoryRegistry",
    "COLOR_PALETTE",
    "FALLBACK_COLOR",
    "Resolution",
    "resolve",
    "resolve_many",
    "describe_resolution",
]
