"""Shared fixtures: a small hand-built form/guide pair and the template store."""

import pytest

from quote_rulesets.models import PriceGuide, QuoteForm
from quote_rulesets.templates import TemplateStore


def make_form(**overrides) -> QuoteForm:
    """A plumbing-style form with one conditional question (q3 on q1)."""
    data = {
        "id": "form_1",
        "title": "Plumbing quote",
        "questions": [
            {
                "id": "q1",
                "type": "single_choice",
                "question": "What type of work?",
                "required": True,
                "order": 1,
                "options": [
                    {"id": "blocked_drain", "label": "Blocked drain", "value": "blocked_drain"},
                    {"id": "hot_water", "label": "Hot water", "value": "hot_water"},
                    {"id": "other", "label": "Other", "value": "other"},
                ],
            },
            {
                "id": "q2",
                "type": "yes_no",
                "question": "Is this an emergency?",
                "required": True,
                "order": 2,
            },
            {
                "id": "q3",
                "type": "single_choice",
                "question": "Which hot water system?",
                "required": True,
                "order": 3,
                "show_if": {"question_id": "q1", "operator": "equals", "value": "hot_water"},
                "options": [
                    {"id": "electric", "label": "Electric", "value": "electric"},
                    {"id": "solar", "label": "Solar", "value": "solar"},
                ],
            },
            {
                "id": "q4",
                "type": "number",
                "question": "How many bathrooms?",
                "order": 4,
                "min": 1,
                "max": 10,
            },
            {
                "id": "q5",
                "type": "long_text",
                "question": "Describe the issue",
                "order": 5,
            },
        ],
    }
    data.update(overrides)
    return QuoteForm.model_validate(data)


def make_guide(**overrides) -> PriceGuide:
    data = {
        "id": "guide_1",
        "form_id": "form_1",
        "estimate_mode": "range",
        "show_to_customer": True,
        "base_price": 100,
        "base_callout_fee": 20,
        "rules": [
            {
                "id": "r1",
                "name": "Blocked drain",
                "condition": {"question_id": "q1", "operator": "equals", "value": "blocked_drain"},
                "action": {"type": "add", "value": {"min": 50, "max": 100}},
                "order": 1,
            },
            {
                "id": "r2",
                "name": "Hot water",
                "condition": {"question_id": "q1", "operator": "equals", "value": "hot_water"},
                "action": {"type": "set_band", "value": {"min": 900, "max": 1800}},
                "order": 2,
            },
            {
                "id": "r3",
                "name": "Solar premium",
                "condition": {"question_id": "q3", "operator": "equals", "value": "solar"},
                "action": {"type": "multiply", "value": 1.5, "note": "Solar units cost more"},
                "order": 3,
            },
            {
                "id": "r4",
                "name": "Emergency",
                "condition": {"question_id": "q2", "operator": "equals", "value": True},
                "action": {"type": "add", "value": 100},
                "order": 4,
            },
        ],
    }
    data.update(overrides)
    return PriceGuide.model_validate(data)


@pytest.fixture
def form():
    return make_form()


@pytest.fixture
def guide():
    return make_guide()


@pytest.fixture(scope="session")
def store():
    """Load the bundled templates once for the entire test session."""
    s = TemplateStore()
    s.load()
    return s
