"""Condition models shared by question visibility and pricing rules.

A condition references a prior answer by question id and compares it with a
typed value:

  - equals: structural equality (membership for multi-select answers)
  - contains: substring / element membership
  - greater_than, less_than: numeric comparison
  - between: inclusive numeric range (pricing rules only)

Two discriminated unions use ``operator`` as their discriminator:
``VisibilityCondition`` (no ``between``) for ``Question.show_if`` and
``RuleCondition`` for ``PriceRule.condition``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class NumericRange(BaseModel):
    """Inclusive ``[min, max]`` range used by ``between`` conditions."""

    model_config = ConfigDict(allow_inf_nan=False)

    min: float
    max: float

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, data: Any) -> Any:
        # Accept the legacy two-element list form: [lo, hi]
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                raise ValueError("between range must have exactly two bounds")
            return {"min": data[0], "max": data[1]}
        return data

    @model_validator(mode="after")
    def _chk(self):
        if self.min > self.max:
            raise ValueError("range min must be <= max")
        return self


class BaseCondition(BaseModel):
    """Fields shared by all condition variants."""

    question_id: str


class EqualsCondition(BaseCondition):
    """True when the answer equals ``value`` (or, for a list answer, contains it)."""

    operator: Literal["equals"] = "equals"
    value: Any


class ContainsCondition(BaseCondition):
    """True when the answer contains ``value`` as a substring or element."""

    operator: Literal["contains"] = "contains"
    value: Union[bool, int, float, str]

    @field_validator("value")
    @classmethod
    def _not_blank(cls, v):
        if isinstance(v, str) and not v.strip():
            raise ValueError("contains value must not be blank")
        return v


class GreaterThanCondition(BaseCondition):
    """True when the numeric answer is strictly greater than ``value``."""

    operator: Literal["greater_than"] = "greater_than"
    value: float = Field(allow_inf_nan=False)


class LessThanCondition(BaseCondition):
    """True when the numeric answer is strictly less than ``value``."""

    operator: Literal["less_than"] = "less_than"
    value: float = Field(allow_inf_nan=False)


class BetweenCondition(BaseCondition):
    """True when the numeric answer lies within ``value`` inclusive."""

    operator: Literal["between"] = "between"
    value: NumericRange


# Question visibility may not use "between".
VisibilityCondition = Annotated[
    Union[EqualsCondition, ContainsCondition, GreaterThanCondition, LessThanCondition],
    Field(discriminator="operator"),
]

RuleCondition = Annotated[
    Union[
        EqualsCondition,
        ContainsCondition,
        GreaterThanCondition,
        LessThanCondition,
        BetweenCondition,
    ],
    Field(discriminator="operator"),
]

Condition = Union[
    EqualsCondition,
    ContainsCondition,
    GreaterThanCondition,
    LessThanCondition,
    BetweenCondition,
]
