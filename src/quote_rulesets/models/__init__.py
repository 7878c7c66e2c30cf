"""Public model re-exports for quote_rulesets.

Consumers should import from ``quote_rulesets.models`` rather than
reaching into sub-modules directly.
"""

# --- Conditions ---
from quote_rulesets.models.condition import (
    BaseCondition,
    BetweenCondition,
    Condition,
    ContainsCondition,
    EqualsCondition,
    GreaterThanCondition,
    LessThanCondition,
    NumericRange,
    RuleCondition,
    VisibilityCondition,
)

# --- Questions ---
from quote_rulesets.models.question import (
    AddressQuestion,
    BaseQuestion,
    DateTimeQuestion,
    LongTextQuestion,
    MultiSelectQuestion,
    NumberQuestion,
    Question,
    QuestionOption,
    QuoteForm,
    ShortTextQuestion,
    SingleChoiceQuestion,
    YesNoQuestion,
)

# --- Pricing ---
from quote_rulesets.models.pricing import (
    AddAction,
    AppliedRule,
    EstimateMode,
    EstimateWarning,
    MultiplyAction,
    PriceEstimate,
    PriceGuide,
    PriceRange,
    PriceRule,
    RuleAction,
    RuleEngineResult,
    SetBandAction,
    order_rules,
)

# --- Templates ---
from quote_rulesets.models.template import QuoteFormTemplate

__all__ = [
    # Conditions
    "BaseCondition",
    "BetweenCondition",
    "Condition",
    "ContainsCondition",
    "EqualsCondition",
    "GreaterThanCondition",
    "LessThanCondition",
    "NumericRange",
    "RuleCondition",
    "VisibilityCondition",
    # Questions
    "AddressQuestion",
    "BaseQuestion",
    "DateTimeQuestion",
    "LongTextQuestion",
    "MultiSelectQuestion",
    "NumberQuestion",
    "Question",
    "QuestionOption",
    "QuoteForm",
    "ShortTextQuestion",
    "SingleChoiceQuestion",
    "YesNoQuestion",
    # Pricing
    "AddAction",
    "AppliedRule",
    "EstimateMode",
    "EstimateWarning",
    "MultiplyAction",
    "PriceEstimate",
    "PriceGuide",
    "PriceRange",
    "PriceRule",
    "RuleAction",
    "RuleEngineResult",
    "SetBandAction",
    "order_rules",
    # Templates
    "QuoteFormTemplate",
]
