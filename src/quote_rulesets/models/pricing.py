"""Price guide models: rules, actions, and estimate outputs.

A price guide holds a business's base pricing plus an ordered list of
conditional rules.  Each rule's action adjusts the running price range:

  - AddAction: add a number (or a {min, max} pair) to the running bounds
  - MultiplyAction: scale both running bounds
  - SetBandAction: overwrite the running bounds with an absolute band

The discriminated ``RuleAction`` union uses the ``type`` field as its
discriminator so Pydantic can deserialise YAML/JSON dicts directly into the
correct type.
"""

from __future__ import annotations

import math
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

from quote_rulesets.constants import DEFAULT_CURRENCY, DEFAULT_DISCLAIMER

from .condition import RuleCondition

EstimateMode = Literal["internal", "range", "starting_from", "disabled"]


class PriceRange(BaseModel):
    """A ``{min, max}`` pair of amounts."""

    model_config = ConfigDict(allow_inf_nan=False)

    min: float
    max: float


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

class AddAction(BaseModel):
    """Add a flat amount, or per-bound amounts, to the running range."""

    model_config = ConfigDict(allow_inf_nan=False)

    type: Literal["add"] = "add"
    value: Union[float, PriceRange]
    note: Optional[str] = None


class MultiplyAction(BaseModel):
    """Multiply both running bounds by a scalar."""

    type: Literal["multiply"] = "multiply"
    value: float
    note: Optional[str] = None

    @field_validator("value")
    @classmethod
    def _finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("multiply value must be finite")
        return v


class SetBandAction(BaseModel):
    """Replace the running range with an absolute band."""

    type: Literal["set_band"] = "set_band"
    value: PriceRange
    note: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def _scalar_band(cls, v: Any) -> Any:
        # A single number sets both bounds
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return {"min": v, "max": v}
        return v

    @model_validator(mode="after")
    def _chk(self):
        if self.value.min > self.value.max:
            raise ValueError("set_band min must be <= max")
        return self


RuleAction = Annotated[
    Union[AddAction, MultiplyAction, SetBandAction],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Rules & guide
# ---------------------------------------------------------------------------

class PriceRule(BaseModel):
    """A conditional adjustment to the running price range."""

    id: str
    name: str
    enabled: bool = True
    condition: RuleCondition
    action: RuleAction
    order: int = 0


def order_rules(rules: List[PriceRule]) -> list[PriceRule]:
    """Return *rules* sorted by ``(order, insertion_index)``."""
    indexed = sorted(enumerate(rules), key=lambda p: (p[1].order, p[0]))
    return [rule for _, rule in indexed]


class PriceGuide(BaseModel):
    """Per-form pricing configuration, read-only to the evaluator.

    ``version`` increases monotonically on every owner edit; estimates
    carry the version they were computed under.  ``ordered_rules`` is
    captured once at construction so repeated evaluations tie-break the
    same way.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    id: str
    form_id: Optional[str] = None

    # Display settings
    estimate_mode: EstimateMode = "internal"
    show_to_customer: bool = False

    # Base pricing
    base_price: Optional[float] = None
    base_callout_fee: Optional[float] = None
    currency: str = DEFAULT_CURRENCY

    rules: List[PriceRule] = Field(default_factory=list)

    # Global clamps
    min_price: Optional[float] = None
    max_price: Optional[float] = None

    disclaimer: str = DEFAULT_DISCLAIMER
    internal_notes: Optional[str] = None

    version: int = Field(default=1, ge=1)
    is_active: bool = True

    _ordered_rules: list = PrivateAttr(default_factory=list)

    def model_post_init(self, __context) -> None:
        self._ordered_rules = order_rules(self.rules)

    @property
    def ordered_rules(self) -> list[PriceRule]:
        return self._ordered_rules

    @property
    def base_amount(self) -> float:
        """Starting amount for both bounds: base price plus callout fee."""
        return (self.base_price or 0.0) + (self.base_callout_fee or 0.0)


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

class AppliedRule(BaseModel):
    """A rule that fired, with the literal adjustment it contributed."""

    rule_id: str
    rule_name: str
    action_type: Literal["add", "multiply", "set_band"]
    adjustment: Union[float, PriceRange]
    note: Optional[str] = None


class EstimateWarning(BaseModel):
    """An evaluation-time anomaly reported instead of raised."""

    code: str
    message: str


class RuleEngineResult(BaseModel):
    """Output of the price rule engine."""

    min: float
    max: float
    applied_rules: List[AppliedRule] = Field(default_factory=list)
    warnings: List[EstimateWarning] = Field(default_factory=list)


class PriceEstimate(BaseModel):
    """Final estimate returned to the caller; never persisted by the core.

    ``min``/``max`` are None when the guide is disabled or inactive.
    """

    min: Optional[float] = None
    max: Optional[float] = None
    applied_rules: List[AppliedRule] = Field(default_factory=list)
    mode: EstimateMode
    disclaimer: str
    currency: str = DEFAULT_CURRENCY
    show_to_customer: bool = False
    guide_version: Optional[int] = None
    warnings: List[EstimateWarning] = Field(default_factory=list)
    ignored_answers: List[str] = Field(default_factory=list)

    @property
    def is_disabled(self) -> bool:
        return self.mode == "disabled"

    def is_current_for(self, guide: PriceGuide) -> bool:
        """True if this estimate was computed under *guide*'s current version."""
        return self.guide_version == guide.version
