"""quote_rulesets — conditional quote forms and rule-based price estimates.

Public API:
    ConditionEvaluator  — evaluates one condition against an answer set
    FormEvaluator       — computes the visible questions of a form
    PriceRuleEngine     — folds matching price rules into a price range
    EstimateAggregator  — packages engine output into a PriceEstimate
    TemplateStore       — loads YAML industry templates

Pure functions:
    evaluate_condition, visible_questions, apply_rules, estimate, try_rules

Validation (publish time):
    ConfigurationError, validate_form, validate_guide, parse_form, parse_guide

Display helpers:
    format_estimate_for_customer, format_estimate_for_internal,
    estimate_confidence
"""

from quote_rulesets.estimate import EstimateAggregator, estimate, try_rules
from quote_rulesets.evaluator import ConditionEvaluator, evaluate_condition
from quote_rulesets.form import FormEvaluator, visible_questions
from quote_rulesets.formatting import (
    estimate_confidence,
    format_estimate_for_customer,
    format_estimate_for_internal,
)
from quote_rulesets.models import (
    AppliedRule,
    PriceEstimate,
    PriceGuide,
    PriceRule,
    QuoteForm,
    RuleEngineResult,
)
from quote_rulesets.pricing import PriceRuleEngine, apply_rules
from quote_rulesets.templates import TemplateStore, generate_suggested_rules
from quote_rulesets.validation import (
    ConfigurationError,
    collect_form_errors,
    collect_guide_errors,
    parse_form,
    parse_guide,
    validate_form,
    validate_guide,
)

__all__ = [
    # Evaluators & store
    "ConditionEvaluator",
    "FormEvaluator",
    "PriceRuleEngine",
    "EstimateAggregator",
    "TemplateStore",
    # Pure functions
    "evaluate_condition",
    "visible_questions",
    "apply_rules",
    "estimate",
    "try_rules",
    "generate_suggested_rules",
    # Models
    "AppliedRule",
    "PriceEstimate",
    "PriceGuide",
    "PriceRule",
    "QuoteForm",
    "RuleEngineResult",
    # Validation
    "ConfigurationError",
    "collect_form_errors",
    "collect_guide_errors",
    "parse_form",
    "parse_guide",
    "validate_form",
    "validate_guide",
    # Display
    "estimate_confidence",
    "format_estimate_for_customer",
    "format_estimate_for_internal",
]
