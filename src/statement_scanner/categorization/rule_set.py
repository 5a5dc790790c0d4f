from typing import Any, Dict, Iterator, List, Optional

from statement_scanner.config.settings import ConfigLoader
from statement_scanner.domain.models import KeywordRule


class RuleSet:
    """
    Ordered collection of keyword rules.

    List order is match priority: the first rule whose keyword matches wins.
    Duplicate keywords are allowed and resolved by that order. Updates and
    deletes that reference an unknown id are silently ignored.
    """

    def __init__(self, rules: Optional[List[KeywordRule]] = None):
        self._rules: List[KeywordRule] = list(rules or [])
        self._version = 0

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "RuleSet":
        """
        Build a rule set from config.

        Args:
            config: Optional config dict. If None, loads from ConfigLoader.
                Useful for testing with custom configs.
                Format: `{"rules": [{"id": "1", "keyword": "esso", "category": "Gas"}]}`
                Rules without an id get a generated one.
        """
        if config is None:
            try:
                config = ConfigLoader.load_rules_config()
            except FileNotFoundError:
                return cls()

        rules = []
        for rule_def in config.get("rules", []):
            if rule_def.get("id"):
                rules.append(KeywordRule(
                    id=str(rule_def["id"]),
                    keyword=rule_def["keyword"],
                    category=rule_def["category"],
                ))
            else:
                rules.append(KeywordRule.create(rule_def["keyword"], rule_def["category"]))
        return cls(rules)

    @property
    def version(self) -> int:
        """Bumped on every change, usable as a cache key"""
        return self._version

    @property
    def rules(self) -> List[KeywordRule]:
        return list(self._rules)

    def get(self, rule_id: str) -> Optional[KeywordRule]:
        for rule in self._rules:
            if rule.id == rule_id:
                return rule
        return None

    def add(self, rule: KeywordRule, position: Optional[int] = None) -> None:
        """
        Add a rule.

        Args:
            rule: The rule to add
            position: Index to insert at. Defaults to the end (lowest priority).
        """
        if position is None:
            self._rules.append(rule)
        else:
            self._rules.insert(position, rule)
        self._version += 1

    def update(self, rule: KeywordRule) -> bool:
        """Replace the rule with the same id, keeping its position"""
        for index, existing in enumerate(self._rules):
            if existing.id == rule.id:
                self._rules[index] = rule
                self._version += 1
                return True
        return False

    def delete(self, rule_id: str) -> bool:
        remaining = [r for r in self._rules if r.id != rule_id]
        if len(remaining) == len(self._rules):
            return False
        self._rules = remaining
        self._version += 1
        return True

    def first_match(self, description: str) -> Optional[KeywordRule]:
        """First rule (in priority order) whose keyword occurs in the description"""
        for rule in self._rules:
            if rule.matches(description):
                return rule
        return None

    def __iter__(self) -> Iterator[KeywordRule]:
        return iter(list(self._rules))

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleSet({len(self._rules)} rules)"
