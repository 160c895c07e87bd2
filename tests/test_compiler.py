"""Tests for rule set compilation, loading and hashing."""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from rules_engine import (
    compile_rule_set, compute_rule_set_hash, load_rule_set, verify_rule_set_hash,
    Equals, OperatorSpec, LogicOperator, InvalidArgumentError, RuleSetIntegrityError
)
from rules_engine.actions import apply_actions
from rules_engine.errors import ErrorConverter, MutationTargetMissingError


# ============== FIXTURES ==============

@pytest.fixture
def sample_rules():
    return {
        "minor": {
            "IF": {"AND": {"p.age": {"lessThan": 18}, "p.country": "US"}},
            "THEN": {"p.err": "too young"},
        },
        "named": {
            "IF": {"OR": {"['p', 'full.name']": "Gon"}},
            "THEN": {"p.flag": True},
            "OTHERWISE": None,
            "WEIGHT": 3,
        },
    }


# ============== COMPILE ==============

class TestCompile:

    def test_keeps_insertion_order(self, sample_rules):
        rule_set = compile_rule_set(sample_rules)

        assert rule_set.rule_names == ["minor", "named"]

    def test_field_variants(self, sample_rules):
        checks = compile_rule_set(sample_rules).rules[0].condition.checks

        assert isinstance(checks[0].check, OperatorSpec)
        assert checks[0].check.less_than == 18
        assert isinstance(checks[1].check, Equals)
        assert checks[1].check.value == "US"

    def test_logic_and_paths(self, sample_rules):
        condition = compile_rule_set(sample_rules).rules[1].condition

        assert condition.logic == LogicOperator.OR
        assert condition.checks[0].key == "['p', 'full.name']"
        assert condition.checks[0].path == ["p", "full.name"]

    def test_null_otherwise_is_empty(self, sample_rules):
        rule = compile_rule_set(sample_rules).rules[1]

        assert rule.on_false == {}
        assert rule.weight == 3

    def test_list_condition_value_has_no_operators(self):
        rule = compile_rule_set({"r": {"IF": {"a": [1, 2]}}}).rules[0]

        assert rule.condition.checks[0].check == OperatorSpec()

    def test_invalid_rule_body(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            compile_rule_set({"r": "not a rule"})

        assert exc_info.value.rule_name == "r"

    def test_invalid_action_map(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            compile_rule_set({"r": {"IF": {"a": 1}, "THEN": ["x"]}})

        assert exc_info.value.validation_errors

    def test_invalid_pattern(self):
        with pytest.raises(InvalidArgumentError):
            compile_rule_set({"r": {"IF": {"a": {"matches": "("}}}})

    def test_logic_body_must_be_mapping(self):
        with pytest.raises(InvalidArgumentError):
            compile_rule_set({"r": {"IF": {"AND": None}}})

    def test_source_not_modified(self, sample_rules):
        before = json.dumps(sample_rules)
        compile_rule_set(sample_rules)

        assert json.dumps(sample_rules) == before


# ============== HASH ==============

class TestRuleSetHash:

    def test_hash_deterministic(self, sample_rules):
        hash1 = compute_rule_set_hash(sample_rules)
        hash2 = compute_rule_set_hash(sample_rules)

        assert hash1 == hash2
        assert len(hash1) == 64  # SHA256 hex

    def test_hash_depends_on_order(self, sample_rules):
        reordered = dict(reversed(list(sample_rules.items())))

        assert compute_rule_set_hash(reordered) != compute_rule_set_hash(sample_rules)

    def test_compiled_rule_set_carries_hash(self, sample_rules):
        assert compile_rule_set(sample_rules).rule_set_hash == compute_rule_set_hash(sample_rules)

    def test_verify(self, sample_rules):
        expected = compute_rule_set_hash(sample_rules)

        assert verify_rule_set_hash(sample_rules, expected) == expected
        with pytest.raises(RuleSetIntegrityError) as exc_info:
            verify_rule_set_hash(sample_rules, "0" * 64)

        assert exc_info.value.actual_hash == expected


# ============== LOAD ==============

class TestLoadRuleSet:

    def test_load_json(self, tmp_path, sample_rules):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps(sample_rules))

        assert list(load_rule_set(path)) == ["minor", "named"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_rule_set(tmp_path / "missing.json")

    def test_non_object_file(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("[1, 2]")

        with pytest.raises(InvalidArgumentError):
            load_rule_set(path)


# ============== ACTIONS & ERRORS ==============

class TestApplyActions:

    def test_overwrites_existing_value(self):
        dataset = {"p": {"err": None}}
        apply_actions({"p.err": "x"}, dataset)

        assert dataset == {"p": {"err": "x"}}

    def test_list_index_target(self):
        dataset = {"items": [{"v": 1}, {"v": 2}]}
        apply_actions({"items.1.v": 20}, dataset)

        assert dataset["items"][1]["v"] == 20

    def test_out_of_range_index(self):
        with pytest.raises(MutationTargetMissingError):
            apply_actions({"items.5": 1}, {"items": []})

    def test_error_to_dict(self):
        with pytest.raises(MutationTargetMissingError) as exc_info:
            apply_actions({"a.b.c": 1}, {"a": {}})

        data = exc_info.value.to_dict()
        assert data["error_code"] == "MUTATION_TARGET_MISSING"
        assert data["path"] == "a.b.c"
        assert data["segment"] == "b"
        assert str(exc_info.value).startswith("[MUTATION_TARGET_MISSING]")


class TestErrorConverter:

    def test_wraps_unexpected(self):
        error = ErrorConverter.from_exception(ValueError("boom"))

        assert error.error_code == "UNEXPECTED_ERROR"
        assert error.context["exception_type"] == "ValueError"

    def test_passes_through_engine_errors(self):
        original = InvalidArgumentError("bad")

        assert ErrorConverter.from_exception(original) is original


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
