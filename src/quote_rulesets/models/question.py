"""Question type models for customer-facing quote forms.

Each question type maps to a specific UI component and answer shape:

    - yes_no: boolean toggle                      → bool
    - single_choice: pick one option              → option id (str)
    - multi_select: pick one or more options      → list of option ids
    - short_text / long_text: free text           → str
    - number: numeric input with min/max/step     → int | float
    - address: street/suburb input                → str or dict
    - date_time: preferred date/time              → str or dict

Any question may carry a ``show_if`` visibility condition referencing an
earlier question.  The discriminated ``Question`` union uses ``type`` as its
discriminator.
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, PrivateAttr, model_validator

from .condition import VisibilityCondition


# --- Base question type ---

class BaseQuestion(BaseModel):
    """Fields shared by all question types."""

    id: str
    question: str
    description: Optional[str] = None
    required: bool = False
    order: int
    show_if: Optional[VisibilityCondition] = None

    @property
    def is_conditional(self) -> bool:
        return self.show_if is not None


# --- Shared option model ---

class QuestionOption(BaseModel):
    """A selectable option; answers reference it by ``id``."""

    id: str
    label: str
    value: str
    icon: Optional[str] = None


class _ChoiceQuestion(BaseQuestion):
    options: List[QuestionOption]

    @model_validator(mode="after")
    def _chk_options(self):
        if not self.options:
            raise ValueError(f"question {self.id}: choice questions need at least one option")
        ids = [o.id for o in self.options]
        if len(ids) != len(set(ids)):
            raise ValueError(f"question {self.id}: duplicate option ids")
        return self

    def option_ids(self) -> set[str]:
        """Option ids; answers and conditions refer to options by id."""
        return {o.id for o in self.options}


class _TextQuestion(BaseQuestion):
    placeholder: Optional[str] = None
    max_length: Optional[int] = Field(default=None, gt=0)


# --- Concrete question types ---

class YesNoQuestion(BaseQuestion):
    """Boolean yes/no toggle."""

    type: Literal["yes_no"] = "yes_no"


class SingleChoiceQuestion(_ChoiceQuestion):
    """Pick exactly one option."""

    type: Literal["single_choice"] = "single_choice"


class MultiSelectQuestion(_ChoiceQuestion):
    """Pick one or more options."""

    type: Literal["multi_select"] = "multi_select"


class ShortTextQuestion(_TextQuestion):
    type: Literal["short_text"] = "short_text"


class LongTextQuestion(_TextQuestion):
    type: Literal["long_text"] = "long_text"


class NumberQuestion(BaseQuestion):
    """Numeric input with optional bounds and a display unit (e.g. "sqm")."""

    type: Literal["number"] = "number"
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = Field(default=None, gt=0)
    unit: Optional[str] = None

    @model_validator(mode="after")
    def _chk(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"question {self.id}: min must be <= max")
        return self


class AddressQuestion(BaseQuestion):
    type: Literal["address"] = "address"
    placeholder: Optional[str] = None


class DateTimeQuestion(BaseQuestion):
    type: Literal["date_time"] = "date_time"


# --- Discriminated union of all question types ---

Question = Annotated[
    Union[
        YesNoQuestion,
        SingleChoiceQuestion,
        MultiSelectQuestion,
        ShortTextQuestion,
        LongTextQuestion,
        NumberQuestion,
        AddressQuestion,
        DateTimeQuestion,
    ],
    Field(discriminator="type"),
]


# --- Form snapshot ---

class QuoteForm(BaseModel):
    """A business's published quote form, supplied as a snapshot per call.

    ``ordered_questions`` is captured once at construction (ascending
    ``order``, ties by position) so evaluation is a single linear scan.
    """

    id: str
    slug: Optional[str] = None
    title: str = ""
    description: Optional[str] = None
    questions: List[Question] = Field(default_factory=list)
    version: int = Field(default=1, ge=1)
    is_published: bool = True
    disclaimer: Optional[str] = None

    _ordered: list = PrivateAttr(default_factory=list)

    def model_post_init(self, __context) -> None:
        indexed = sorted(enumerate(self.questions), key=lambda p: (p[1].order, p[0]))
        self._ordered = [q for _, q in indexed]

    @property
    def ordered_questions(self) -> list:
        """Questions in ascending display order."""
        return self._ordered

    def get_question(self, question_id: str):
        """Look up a question by id.

        Raises:
            KeyError: if the form has no question with that id.
        """
        for q in self.questions:
            if q.id == question_id:
                return q
        raise KeyError(question_id)
