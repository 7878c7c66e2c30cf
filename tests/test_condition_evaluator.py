"""ConditionEvaluator unit tests — every operator and the fail-closed cases.

Operator reference:
    equals        — structural equality; a list answer matches any element
    contains      — element (list) or case-insensitive substring (text)
    greater_than  — strict numeric comparison (numeric strings coerced)
    less_than     — strict numeric comparison
    between       — inclusive numeric range, value = {min, max} or [lo, hi]
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from quote_rulesets.evaluator import ConditionEvaluator, evaluate_condition
from quote_rulesets.models import (
    BetweenCondition,
    ContainsCondition,
    EqualsCondition,
    GreaterThanCondition,
    LessThanCondition,
    RuleCondition,
    VisibilityCondition,
)


@pytest.fixture
def evaluator():
    return ConditionEvaluator()


# =====================================================================
# equals
# =====================================================================


class TestEquals:

    def test_matching_option_id(self, evaluator):
        cond = EqualsCondition(question_id="q1", value="hot_water")
        assert evaluator.evaluate(cond, {"q1": "hot_water"}) is True
        assert evaluator.evaluate(cond, {"q1": "blocked_drain"}) is False

    def test_boolean_answer(self, evaluator):
        cond = EqualsCondition(question_id="q2", value=True)
        assert evaluator.evaluate(cond, {"q2": True}) is True
        assert evaluator.evaluate(cond, {"q2": False}) is False

    def test_boolean_never_equals_number(self, evaluator):
        """True == 1 in Python, but a yes/no answer is not the number 1."""
        cond = EqualsCondition(question_id="q2", value=True)
        assert evaluator.evaluate(cond, {"q2": 1}) is False
        cond = EqualsCondition(question_id="q4", value=1)
        assert evaluator.evaluate(cond, {"q4": True}) is False

    def test_numeric_string_equals_number(self, evaluator):
        """A text input "3" matches 3, the same coercion greater_than uses."""
        cond = EqualsCondition(question_id="q4", value=3)
        assert evaluator.evaluate(cond, {"q4": "3"}) is True
        assert evaluator.evaluate(cond, {"q4": " 3.0 "}) is True
        assert evaluator.evaluate(cond, {"q4": "abc"}) is False
        cond = EqualsCondition(question_id="q4", value="3")
        assert evaluator.evaluate(cond, {"q4": 3}) is True

    def test_multi_select_answer_matches_any_element(self, evaluator):
        cond = EqualsCondition(question_id="q3", value="oven")
        assert evaluator.evaluate(cond, {"q3": ["kitchen", "oven"]}) is True
        assert evaluator.evaluate(cond, {"q3": ["kitchen"]}) is False

    def test_list_value_ignores_selection_order(self, evaluator):
        cond = EqualsCondition(question_id="q3", value=["oven", "kitchen"])
        assert evaluator.evaluate(cond, {"q3": ["kitchen", "oven"]}) is True
        assert evaluator.evaluate(cond, {"q3": ["kitchen"]}) is False


# =====================================================================
# contains
# =====================================================================


class TestContains:

    def test_list_membership(self, evaluator):
        cond = ContainsCondition(question_id="q3", value="bathrooms")
        assert evaluator.evaluate(cond, {"q3": ["kitchen", "bathrooms"]}) is True
        assert evaluator.evaluate(cond, {"q3": ["kitchen"]}) is False

    def test_substring_is_case_insensitive(self, evaluator):
        cond = ContainsCondition(question_id="q5", value="Leak")
        assert evaluator.evaluate(cond, {"q5": "Major LEAK under sink"}) is True
        assert evaluator.evaluate(cond, {"q5": "blocked drain"}) is False

    def test_structured_address_searches_text_parts(self, evaluator):
        cond = ContainsCondition(question_id="addr", value="bondi")
        answer = {"street": "4 Beach Rd", "suburb": "Bondi", "postcode": "2026"}
        assert evaluator.evaluate(cond, {"addr": answer}) is True

    def test_number_answer_is_false(self, evaluator):
        cond = ContainsCondition(question_id="q4", value="3")
        assert evaluator.evaluate(cond, {"q4": 3}) is False

    def test_blank_value_rejected(self):
        with pytest.raises(ValidationError):
            ContainsCondition(question_id="q5", value="   ")


# =====================================================================
# Numeric operators
# =====================================================================


class TestNumeric:

    def test_greater_than_is_strict(self, evaluator):
        cond = GreaterThanCondition(question_id="q4", value=2)
        assert evaluator.evaluate(cond, {"q4": 3}) is True
        assert evaluator.evaluate(cond, {"q4": 2}) is False

    def test_less_than_is_strict(self, evaluator):
        cond = LessThanCondition(question_id="q4", value=2)
        assert evaluator.evaluate(cond, {"q4": 1.5}) is True
        assert evaluator.evaluate(cond, {"q4": 2}) is False

    def test_numeric_string_is_coerced(self, evaluator):
        cond = GreaterThanCondition(question_id="q4", value=10)
        assert evaluator.evaluate(cond, {"q4": " 15 "}) is True

    def test_non_numeric_answer_is_false(self, evaluator):
        cond = GreaterThanCondition(question_id="q4", value=10)
        assert evaluator.evaluate(cond, {"q4": "lots"}) is False
        assert evaluator.evaluate(cond, {"q4": True}) is False
        assert evaluator.evaluate(cond, {"q4": ["15"]}) is False

    def test_between_is_inclusive(self, evaluator):
        cond = BetweenCondition(question_id="q4", value={"min": 4, "max": 50})
        assert evaluator.evaluate(cond, {"q4": 4}) is True
        assert evaluator.evaluate(cond, {"q4": 50}) is True
        assert evaluator.evaluate(cond, {"q4": 3.99}) is False
        assert evaluator.evaluate(cond, {"q4": 51}) is False

    def test_between_accepts_pair(self, evaluator):
        cond = BetweenCondition(question_id="q4", value=[1, 3])
        assert cond.value.min == 1 and cond.value.max == 3
        assert evaluator.evaluate(cond, {"q4": 2}) is True

    def test_between_inverted_range_rejected(self):
        with pytest.raises(ValidationError):
            BetweenCondition(question_id="q4", value={"min": 5, "max": 1})

    @pytest.mark.parametrize("bad", ["nan", "inf", float("-inf")])
    def test_non_finite_bounds_rejected(self, bad):
        with pytest.raises(ValidationError):
            GreaterThanCondition(question_id="q4", value=bad)
        with pytest.raises(ValidationError):
            BetweenCondition(question_id="q4", value={"min": 0, "max": bad})


# =====================================================================
# Missing answers and parsing
# =====================================================================


class TestMissingAnswers:

    @pytest.mark.parametrize("answers", [{}, {"q1": None}, {"other": "hot_water"}])
    def test_unanswered_question_is_false(self, evaluator, answers):
        cond = EqualsCondition(question_id="q1", value="hot_water")
        assert evaluator.evaluate(cond, answers) is False

    def test_equals_none_still_false_when_unanswered(self, evaluator):
        cond = EqualsCondition(question_id="q1", value=None)
        assert evaluator.evaluate(cond, {}) is False

    def test_module_shorthand(self):
        cond = LessThanCondition(question_id="q4", value=5)
        assert evaluate_condition(cond, {"q4": 1}) is True


class TestConditionParsing:

    def test_rule_condition_dispatches_on_operator(self):
        adapter = TypeAdapter(RuleCondition)
        cond = adapter.validate_python(
            {"question_id": "q4", "operator": "between", "value": {"min": 1, "max": 2}}
        )
        assert isinstance(cond, BetweenCondition)

    def test_visibility_condition_rejects_between(self):
        adapter = TypeAdapter(VisibilityCondition)
        with pytest.raises(ValidationError):
            adapter.validate_python(
                {"question_id": "q4", "operator": "between", "value": [1, 2]}
            )

    def test_unknown_operator_rejected(self):
        adapter = TypeAdapter(RuleCondition)
        with pytest.raises(ValidationError):
            adapter.validate_python({"question_id": "q1", "operator": "matches", "value": "x"})
