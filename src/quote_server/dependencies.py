"""FastAPI dependency injection — provides the template store and evaluators.

The template store is loaded once during the app lifespan and stashed on
``app.state``.  The evaluators hold no state, so a single instance of each
serves every request.
"""

from fastapi import Request

from quote_rulesets.estimate import EstimateAggregator
from quote_rulesets.form import FormEvaluator
from quote_rulesets.pricing import PriceRuleEngine
from quote_rulesets.templates import TemplateStore


def get_store(request: Request) -> TemplateStore:
    """Return the TemplateStore singleton from ``app.state``."""
    return request.app.state.store


def get_form_evaluator(request: Request) -> FormEvaluator:
    return request.app.state.form_evaluator


def get_engine(request: Request) -> PriceRuleEngine:
    return request.app.state.engine


def get_aggregator(request: Request) -> EstimateAggregator:
    return request.app.state.aggregator
