import pytest
from decimal import Decimal

from statement_scanner.categorization.resolver import (
    build_chain,
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
from statement_scanner.domain.models import KeywordRule


@pytest.mark.unit
class TestResolvePrecedence:
    """Manual override -> keyword rule -> AI baseline"""

    def test_manual_override_beats_matching_rule(self, make_txn, rule_set: RuleSet):
        # Arrange
        txn = make_txn(description="NETFLIX.COM", category="Online Services",
                       manual_category="Business")

        # Act
        category = resolve(txn, rule_set)

        # Assert
        assert category == "Business"

    def test_manual_override_wins_for_any_rule_content(self, make_txn):
        txn = make_txn(description="ESSO 1234", manual_category="Travel")
        rule_sets = [
            RuleSet(),
            RuleSet([KeywordRule(id="a", keyword="esso", category="Gas")]),
            RuleSet([KeywordRule(id="b", keyword="e", category="X"),
                     KeywordRule(id="c", keyword="1234", category="Y")]),
        ]

        for rules in rule_sets:
            assert resolve(txn, rules) == "Travel"

    def test_empty_manual_category_is_not_an_override(self, make_txn, rule_set: RuleSet):
        txn = make_txn(description="NETFLIX.COM", manual_category="")

        assert resolve(txn, rule_set) == "Entertainment"

    def test_first_listed_rule_wins(self, make_txn):
        # Arrange
        rules = RuleSet([
            KeywordRule(id="1", keyword="A", category="X"),
            KeywordRule(id="2", keyword="A", category="Y"),
        ])
        txn = make_txn(description="SHOP A", category="Other")

        # Act & Assert
        assert resolve(txn, rules) == "X"

    def test_matching_is_case_insensitive(self, make_txn):
        rules = RuleSet([KeywordRule(id="1", keyword="netflix", category="Entertainment")])
        txn = make_txn(description="NETFLIX.COM BILLING", category="Online Services")

        assert resolve(txn, rules) == "Entertainment"

    def test_uppercase_keyword_matches_lowercase_description(self, make_txn):
        rules = RuleSet([KeywordRule(id="1", keyword="COSTCO GAS", category="Gas")])
        txn = make_txn(description="costco gas w1234", category="Shopping")

        assert resolve(txn, rules) == "Gas"

    def test_matching_is_substring_not_word_based(self, make_txn):
        rules = RuleSet([KeywordRule(id="1", keyword="gas", category="Gas")])
        txn = make_txn(description="VEGAS HOTEL", category="Travel")

        # Over-matching short keywords is accepted behaviour
        assert resolve(txn, rules) == "Gas"

    def test_falls_back_to_ai_category(self, make_txn, rule_set: RuleSet):
        txn = make_txn(description="LOBLAWS #1021", category="Groceries")

        assert resolve(txn, rule_set) == "Groceries"

    def test_empty_description_never_matches(self, make_txn):
        rules = RuleSet([KeywordRule(id="1", keyword="a", category="X")])
        txn = make_txn(description="", category="Other")

        assert resolve(txn, rules) == "Other"

    def test_orphan_rule_category_is_returned_as_is(self, make_txn):
        """Rules may point at categories the registry doesn't know"""
        rules = RuleSet([KeywordRule(id="1", keyword="zoo", category="Animals")])
        txn = make_txn(description="CITY ZOO", category="Entertainment")

        assert resolve(txn, rules) == "Animals"


@pytest.mark.unit
class TestResolveMany:

    def test_resolve_many_returns_effective_categories(self, sample_transactions, rule_set):
        # Act
        resolved = resolve_many(sample_transactions, rule_set)

        # Assert
        assert [t.category for t in resolved] == ["Entertainment", "Groceries", "Other"]

    def test_resolve_many_does_not_mutate_inputs(self, sample_transactions, rule_set):
        before = list(sample_transactions)

        resolved = resolve_many(sample_transactions, rule_set)

        assert sample_transactions == before
        assert sample_transactions[0].category == "Online Services"
        assert resolved[0] is not sample_transactions[0]

    def test_resolve_many_keeps_original_category(self, sample_transactions, rule_set):
        resolved = resolve_many(sample_transactions, rule_set)

        assert resolved[0].original_category == "Online Services"
        assert resolved[0].id == sample_transactions[0].id
        assert resolved[0].amount == Decimal("16.99")

    def test_rule_deletion_changes_result_immediately(self, sample_transactions, rule_set):
        assert resolve_many(sample_transactions, rule_set)[0].category == "Entertainment"

        rule_set.delete("r1")

        assert resolve_many(sample_transactions, rule_set)[0].category == "Online Services"


@pytest.mark.unit
class TestResolutionChain:

    def test_chain_order(self, rule_set):
        chain = build_chain(rule_set)

        assert isinstance(chain, ManualOverrideRule)
        assert isinstance(chain.next_rule, KeywordMatchRule)
        assert isinstance(chain.next_rule.next_rule, BaselineRule)
        assert chain.next_rule.next_rule.next_rule is None

    def test_describe_manual(self, make_txn, rule_set):
        txn = make_txn(description="NETFLIX", manual_category="Business")

        resolution = describe_resolution(txn, rule_set)

        assert resolution.source == "manual"
        assert resolution.category == "Business"
        assert resolution.rule is None

    def test_describe_rule_reports_matching_rule(self, make_txn, rule_set):
        txn = make_txn(description="ESSO STATION")

        resolution = describe_resolution(txn, rule_set)

        assert resolution.source == "rule"
        assert resolution.category == "Gas"
        assert resolution.rule.id == "r2"

    def test_describe_ai(self, make_txn, rule_set):
        txn = make_txn(description="LOBLAWS", category="Groceries")

        resolution = describe_resolution(txn, rule_set)

        assert resolution.source == "ai"
        assert resolution.category == "Groceries"

    def test_keyword_rule_get_category_without_match_raises(self, make_txn):
        rule = KeywordMatchRule(RuleSet())

        with pytest.raises(RuntimeError, match="no match found"):
            rule._get_category(make_txn(description="ANYTHING"))
