"""Pricing endpoints — rule application, full estimates and rule testing.

``/pricing/estimate`` is the endpoint a quote form calls on submit; the
others support the business owner's price-guide editor.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from quote_rulesets.estimate import EstimateAggregator, try_rules
from quote_rulesets.formatting import (
    estimate_confidence,
    format_estimate_for_customer,
    format_estimate_for_internal,
)
from quote_rulesets.models.pricing import (
    PriceEstimate,
    PriceGuide,
    PriceRule,
    RuleEngineResult,
)
from quote_rulesets.models.question import QuoteForm
from quote_rulesets.pricing import PriceRuleEngine
from quote_rulesets.validation import collect_guide_errors, validate_form, validate_guide

from quote_server.dependencies import get_aggregator, get_engine

router = APIRouter(prefix="/pricing", tags=["pricing"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class ApplyRequest(BaseModel):
    """Body for POST /pricing/apply — raw engine output, no visibility filter."""
    guide: PriceGuide
    answers: dict[str, Any] = Field(default_factory=dict)


class EstimateRequest(BaseModel):
    form: QuoteForm
    guide: PriceGuide
    answers: dict[str, Any] = Field(default_factory=dict)


class TryRulesRequest(BaseModel):
    """Body for POST /pricing/test — try draft rules against sample answers."""
    rules: list[PriceRule]
    answers: dict[str, Any] = Field(default_factory=dict)
    base_price: float = 0
    base_callout_fee: float = 0


class ValidateGuideRequest(BaseModel):
    guide: PriceGuide
    form: Optional[QuoteForm] = None


class EstimateResponse(BaseModel):
    estimate: PriceEstimate
    customer_display: str
    internal_display: str
    confidence: str


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/apply")
def apply_guide(
    body: ApplyRequest,
    engine: PriceRuleEngine = Depends(get_engine),
) -> RuleEngineResult:
    """Fold the guide's rules over the answers and return the clamped range."""
    validate_guide(body.guide)
    return engine.apply_guide(body.guide, body.answers)


@router.post("/estimate")
def create_estimate(
    body: EstimateRequest,
    aggregator: EstimateAggregator = Depends(get_aggregator),
) -> EstimateResponse:
    """Compute the estimate for a submitted quote form.

    A form or guide that fails publish-time validation (including a guide
    bound to another form) yields 400 with the configuration errors.
    """
    validate_form(body.form)
    validate_guide(body.guide, body.form)
    result = aggregator.estimate(body.form, body.guide, body.answers)
    return EstimateResponse(
        estimate=result,
        customer_display=format_estimate_for_customer(result),
        internal_display=format_estimate_for_internal(result),
        confidence=estimate_confidence(result, len(body.form.questions)),
    )


@router.post("/test")
def try_price_rules(body: TryRulesRequest) -> EstimateResponse:
    result = try_rules(
        body.rules,
        body.answers,
        base_price=body.base_price,
        base_callout_fee=body.base_callout_fee,
    )
    return EstimateResponse(
        estimate=result,
        customer_display=format_estimate_for_customer(result),
        internal_display=format_estimate_for_internal(result),
        confidence=estimate_confidence(result, len(body.answers)),
    )


@router.post("/validate")
def check_guide(body: ValidateGuideRequest) -> dict:
    """Check a price guide, optionally against the form it prices."""
    errors = collect_guide_errors(body.guide, body.form)
    return {"valid": not errors, "errors": errors}
