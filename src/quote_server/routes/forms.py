"""Form endpoints — visible questions and publish-time form validation.

The caller sends the full form snapshot with every request; the server
holds no per-business state.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from quote_rulesets.form import FormEvaluator
from quote_rulesets.models.question import QuoteForm
from quote_rulesets.validation import collect_form_errors, validate_form

from quote_server.dependencies import get_form_evaluator

router = APIRouter(prefix="/forms", tags=["forms"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class VisibleQuestionsRequest(BaseModel):
    """Body for POST /forms/visible-questions."""
    form: QuoteForm
    answers: dict[str, Any] = Field(default_factory=dict)


class ValidateFormRequest(BaseModel):
    form: QuoteForm


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/visible-questions")
def visible_questions(
    body: VisibleQuestionsRequest,
    evaluator: FormEvaluator = Depends(get_form_evaluator),
) -> dict:
    """Return the questions to render for the current partial answers.

    ``missing_required`` lists visible required questions still unanswered,
    so the client can gate its submit button.  A form that would fail
    publish-time validation is rejected with 400 rather than evaluated.
    """
    validate_form(body.form)
    visible = evaluator.visible_questions(body.form, body.answers)
    return {
        "form_id": body.form.id,
        "questions": [q.model_dump(mode="json") for q in visible],
        "missing_required": evaluator.missing_required(body.form, body.answers),
    }


@router.post("/validate")
def check_form(body: ValidateFormRequest) -> dict:
    """Check a form before publishing; problems are returned, not raised."""
    errors = collect_form_errors(body.form)
    return {"valid": not errors, "errors": errors}
