"""Reference data endpoints — question types, estimate modes, industries,
and the industry templates loaded from ``v1/templates/``.

These are read-only endpoints; the data is public reference information.
"""

from fastapi import APIRouter, Depends

from quote_rulesets.constants import (
    ESTIMATE_MODE_LABELS,
    INDUSTRY_OPTIONS,
    QUESTION_TYPE_LABELS,
)
from quote_rulesets.models.template import QuoteFormTemplate
from quote_rulesets.templates import TemplateStore

from quote_server.dependencies import get_store

router = APIRouter(prefix="/reference", tags=["reference"])


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("/question-types")
def list_question_types() -> list[dict]:
    return [{"value": k, "label": v} for k, v in QUESTION_TYPE_LABELS.items()]


@router.get("/estimate-modes")
def list_estimate_modes() -> list[dict]:
    return [{"value": k, "label": v} for k, v in ESTIMATE_MODE_LABELS.items()]


@router.get("/industries")
def list_industries() -> list[dict]:
    return INDUSTRY_OPTIONS


@router.get("/templates")
def list_templates(
    industry: str | None = None,
    store: TemplateStore = Depends(get_store),
) -> list[dict]:
    """Summaries of the active templates, optionally filtered by industry."""
    return [
        {
            "id": tpl.id,
            "name": tpl.name,
            "industry": tpl.industry,
            "description": tpl.description,
            "icon": tpl.icon,
            "question_count": len(tpl.questions),
            "rule_count": len(tpl.price_guide_template),
        }
        for tpl in store.list_templates(industry)
    ]


@router.get("/templates/{template_id}")
def get_template(
    template_id: str,
    store: TemplateStore = Depends(get_store),
) -> QuoteFormTemplate:
    """Full template; an unknown id raises ``KeyError`` → 404."""
    return store.get(template_id)
