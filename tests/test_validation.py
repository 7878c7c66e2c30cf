"""Publish-time validation tests for forms and price guides."""

import pytest

from quote_rulesets.pricing import PriceRuleEngine
from quote_rulesets.validation import (
    ConfigurationError,
    collect_form_errors,
    collect_guide_errors,
    parse_form,
    parse_guide,
    validate_form,
    validate_guide,
)

from conftest import make_form, make_guide


def _question(qid, order, qtype="short_text", show_if=None, **extra):
    q = {"id": qid, "type": qtype, "question": qid.upper(), "order": order, **extra}
    if show_if:
        q["show_if"] = show_if
    return q


CHOICES = {"options": [{"id": "a", "label": "A", "value": "a"}, {"id": "b", "label": "B", "value": "b"}]}


def _form(*questions):
    return make_form(questions=list(questions))


# =====================================================================
# Forms
# =====================================================================


class TestFormValidation:

    def test_sample_form_is_valid(self, form):
        assert collect_form_errors(form) == []
        assert validate_form(form) is form

    def test_duplicate_ids_and_orders(self):
        form = _form(_question("q1", 1), _question("q1", 1))
        errors = collect_form_errors(form)
        assert any("Duplicate question id 'q1'" in e for e in errors)
        assert any("Duplicate display order 1" in e for e in errors)

    def test_unknown_reference(self):
        cond = {"question_id": "ghost", "operator": "equals", "value": "x"}
        errors = collect_form_errors(_form(_question("q1", 1, show_if=cond)))
        assert errors == ["Question 'q1' show_if references unknown question 'ghost'"]

    def test_self_reference(self):
        cond = {"question_id": "q1", "operator": "contains", "value": "x"}
        errors = collect_form_errors(_form(_question("q1", 1, show_if=cond)))
        assert errors == ["Question 'q1' show_if references itself"]

    def test_forward_reference(self):
        cond = {"question_id": "q2", "operator": "contains", "value": "x"}
        form = _form(_question("q1", 1, show_if=cond), _question("q2", 2))
        errors = collect_form_errors(form)
        assert len(errors) == 1
        assert "references later question 'q2'" in errors[0]

    def test_cycle(self):
        form = _form(
            _question("q1", 1, show_if={"question_id": "q2", "operator": "contains", "value": "x"}),
            _question("q2", 2, show_if={"question_id": "q1", "operator": "contains", "value": "y"}),
        )
        errors = collect_form_errors(form)
        assert any("cyclic visibility dependency" in e for e in errors)

    def test_numeric_operator_needs_number_question(self):
        form = _form(
            _question("q1", 1),
            _question("q2", 2, show_if={"question_id": "q1", "operator": "greater_than", "value": 3}),
        )
        errors = collect_form_errors(form)
        assert errors and "needs a number question" in errors[0]

    def test_yes_no_compared_with_boolean(self):
        form = _form(
            _question("q1", 1, "yes_no"),
            _question("q2", 2, show_if={"question_id": "q1", "operator": "equals", "value": "yes"}),
        )
        assert any("true/false" in e for e in collect_form_errors(form))

    def test_choice_value_must_be_an_option(self):
        form = _form(
            _question("q1", 1, "single_choice", **CHOICES),
            _question("q2", 2, show_if={"question_id": "q1", "operator": "equals", "value": "z"}),
        )
        assert any("is not an option of 'q1'" in e for e in collect_form_errors(form))

    def test_choice_condition_names_option_id_not_value(self):
        """Answers carry the option id, so a condition on the value could never fire."""
        options = {"options": [{"id": "opt_hw", "label": "Hot water", "value": "hot_water"}]}
        on_value = {"question_id": "q1", "operator": "equals", "value": "hot_water"}
        form = _form(
            _question("q1", 1, "single_choice", **options),
            _question("q2", 2, show_if=on_value),
        )
        assert collect_form_errors(form) == [
            "Question 'q2' show_if: ['hot_water'] is not an option of 'q1'"
        ]

        on_id = dict(on_value, value="opt_hw")
        form = _form(
            _question("q1", 1, "single_choice", **options),
            _question("q2", 2, show_if=on_id),
        )
        assert collect_form_errors(form) == []

    @pytest.mark.parametrize("value", [{"a": 1}, ["a", ["b"]], [{"a": 1}]])
    def test_unhashable_choice_value_reported(self, value):
        form = _form(
            _question("q1", 1, "single_choice", **CHOICES),
            _question("q2", 2, show_if={"question_id": "q1", "operator": "equals", "value": value}),
        )
        errors = collect_form_errors(form)
        assert len(errors) == 1
        assert "is not an option of 'q1'" in errors[0]

    def test_contains_cannot_target_single_choice(self):
        form = _form(
            _question("q1", 1, "single_choice", **CHOICES),
            _question("q2", 2, show_if={"question_id": "q1", "operator": "contains", "value": "a"}),
        )
        assert any("cannot target single_choice" in e for e in collect_form_errors(form))

    def test_validate_form_raises_with_all_errors(self):
        form = _form(_question("q1", 1), _question("q1", 1))
        with pytest.raises(ConfigurationError) as exc_info:
            validate_form(form)
        assert len(exc_info.value.errors) == 2


class TestParsing:

    def test_parse_form_wraps_pydantic_errors(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_form({"id": "f", "questions": [{"id": "q1", "type": "slider", "question": "?", "order": 1}]})
        assert exc_info.value.errors
        assert isinstance(exc_info.value, ValueError)

    def test_choice_question_needs_options(self):
        with pytest.raises(ConfigurationError):
            parse_form({"id": "f", "questions": [_question("q1", 1, "single_choice", options=[])]})

    def test_parse_guide_rejects_between_with_bad_range(self):
        with pytest.raises(ConfigurationError):
            parse_guide({
                "id": "g",
                "rules": [{
                    "id": "r1", "name": "x",
                    "condition": {"question_id": "q4", "operator": "between", "value": [1]},
                    "action": {"type": "add", "value": 1},
                }],
            })

    def test_parse_guide_rejects_non_finite_amounts(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_guide({"id": "g", "base_price": "inf"})
        assert exc_info.value.errors[0].startswith("base_price:")

    def test_parse_guide_ok(self):
        guide = parse_guide({"id": "g", "base_price": 50})
        assert guide.base_amount == 50


# =====================================================================
# Guides
# =====================================================================


class TestGuideValidation:

    def test_sample_guide_is_valid(self, form, guide):
        assert collect_guide_errors(guide, form) == []
        assert validate_guide(guide, form) is guide

    def test_duplicate_rule_ids_and_blank_names(self):
        guide = make_guide(rules=[
            {"id": "r1", "name": " ", "condition": {"question_id": "q1", "operator": "equals", "value": "other"},
             "action": {"type": "add", "value": 1}},
            {"id": "r1", "name": "ok", "condition": {"question_id": "q1", "operator": "equals", "value": "other"},
             "action": {"type": "add", "value": 1}},
        ])
        errors = collect_guide_errors(guide)
        assert any("Duplicate rule id 'r1'" in e for e in errors)
        assert any("name is required" in e for e in errors)

    def test_form_mismatch(self, form):
        errors = collect_guide_errors(make_guide(form_id="other"), form)
        assert errors == ["Price guide belongs to form 'other', not 'form_1'"]

    def test_rule_on_unknown_question(self, form):
        guide = make_guide(rules=[{
            "id": "r1", "name": "x",
            "condition": {"question_id": "q99", "operator": "equals", "value": 1},
            "action": {"type": "add", "value": 1},
        }])
        assert collect_guide_errors(guide, form) == [
            "Rule 'r1' condition references unknown question 'q99'"
        ]

    def test_between_on_number_question_ok(self, form):
        guide = make_guide(rules=[{
            "id": "r1", "name": "x",
            "condition": {"question_id": "q4", "operator": "between", "value": [2, 4]},
            "action": {"type": "add", "value": 1},
        }])
        assert collect_guide_errors(guide, form) == []

    def test_validate_guide_raises(self, form):
        with pytest.raises(ConfigurationError):
            validate_guide(make_guide(form_id="other"), form)

    def test_rule_on_option_id_fires_once_validated(self):
        form = make_form(questions=[_question(
            "q1", 1, "single_choice",
            options=[{"id": "opt_hw", "label": "Hot water", "value": "hot_water"}],
        )])
        on_value = make_guide(rules=[{
            "id": "r1", "name": "Hot water",
            "condition": {"question_id": "q1", "operator": "equals", "value": "hot_water"},
            "action": {"type": "add", "value": 300},
        }])
        assert collect_guide_errors(on_value, form) == [
            "Rule 'r1' condition: ['hot_water'] is not an option of 'q1'"
        ]

        on_id = make_guide(rules=[{
            "id": "r1", "name": "Hot water",
            "condition": {"question_id": "q1", "operator": "equals", "value": "opt_hw"},
            "action": {"type": "add", "value": 300},
        }])
        validate_guide(on_id, form)
        result = PriceRuleEngine().apply_guide(on_id, {"q1": "opt_hw"})
        assert [a.rule_id for a in result.applied_rules] == ["r1"]
        assert (result.min, result.max) == (420, 420)
