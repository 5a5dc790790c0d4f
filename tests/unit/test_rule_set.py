import pytest

from statement_scanner.categorization.rule_set import RuleSet
from statement_scanner.domain.models import KeywordRule


@pytest.mark.unit
class TestRuleSetOperations:

    def test_add_appends_with_lowest_priority(self, rule_set: RuleSet):
        # Arrange
        rule = KeywordRule(id="r3", keyword="shell", category="Gas")

        # Act
        rule_set.add(rule)

        # Assert
        assert [r.id for r in rule_set] == ["r1", "r2", "r3"]

    def test_add_at_position(self, rule_set: RuleSet):
        rule = KeywordRule(id="r0", keyword="net", category="Internet")

        rule_set.add(rule, position=0)

        assert [r.id for r in rule_set] == ["r0", "r1", "r2"]
        assert rule_set.first_match("NETFLIX").id == "r0"

    def test_duplicate_keywords_are_allowed(self, rule_set: RuleSet):
        rule_set.add(KeywordRule(id="r3", keyword="netflix", category="Business"))

        assert len(rule_set) == 3
        assert rule_set.first_match("netflix.com").category == "Entertainment"

    def test_update_replaces_in_place(self, rule_set: RuleSet):
        updated = KeywordRule(id="r1", keyword="spotify", category="Entertainment")

        assert rule_set.update(updated) is True

        assert [r.id for r in rule_set] == ["r1", "r2"]
        assert rule_set.get("r1").keyword == "spotify"

    def test_update_unknown_id_is_noop(self, rule_set: RuleSet):
        before = rule_set.rules
        version = rule_set.version

        result = rule_set.update(KeywordRule(id="missing", keyword="x", category="Y"))

        assert result is False
        assert rule_set.rules == before
        assert rule_set.version == version

    def test_delete(self, rule_set: RuleSet):
        assert rule_set.delete("r1") is True

        assert rule_set.get("r1") is None
        assert rule_set.first_match("NETFLIX") is None

    def test_delete_unknown_id_is_noop(self, rule_set: RuleSet):
        version = rule_set.version

        assert rule_set.delete("missing") is False
        assert len(rule_set) == 2
        assert rule_set.version == version

    def test_version_changes_on_mutation(self, rule_set: RuleSet):
        v0 = rule_set.version
        rule_set.add(KeywordRule.create("uber", "Transportation"))
        v1 = rule_set.version
        rule_set.delete("r2")

        assert v0 < v1 < rule_set.version

    def test_rules_property_is_a_copy(self, rule_set: RuleSet):
        rule_set.rules.clear()

        assert len(rule_set) == 2


@pytest.mark.unit
class TestKeywordRule:

    def test_empty_keyword_rejected(self):
        with pytest.raises(ValueError, match="non-empty keyword"):
            KeywordRule(id="1", keyword="", category="Gas")

    def test_create_generates_unique_ids(self):
        a = KeywordRule.create("esso", "Gas")
        b = KeywordRule.create("esso", "Gas")

        assert a.id and b.id
        assert a.id != b.id

    def test_matches_ignores_case(self):
        rule = KeywordRule(id="1", keyword="Rogers ******2665", category="Cellphone")

        assert rule.matches("ROGERS ******2665 TORONTO ON")
        assert not rule.matches("ROGERS ******8017")
        assert not rule.matches("")


@pytest.mark.unit
class TestRuleSetConfig:

    def test_from_custom_config(self):
        config = {
            "rules": [
                {"id": "a", "keyword": "loblaws", "category": "Groceries"},
                {"keyword": "esso", "category": "Gas"},
            ]
        }

        rules = RuleSet.from_config(config)

        assert len(rules) == 2
        assert rules.get("a").category == "Groceries"
        assert rules.rules[1].id  # generated

    def test_from_default_config(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STATEMENT_SCANNER_CONFIG_DIR", str(tmp_path))

        rules = RuleSet.from_config()

        assert len(rules) == 9
        assert rules.first_match("NETFLIX.COM").category == "Entertainment"
        assert rules.first_match("COSTCO GAS W1234").category == "Gas"
        assert rules.first_match("SHOPPERS DRUG MART") is None

    def test_malformed_config_raises(self):
        with pytest.raises(KeyError):
            RuleSet.from_config({"rules": [{"id": "1", "category": "Gas"}]})
