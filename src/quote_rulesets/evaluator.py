"""ConditionEvaluator — evaluates a single condition against an answer set.

Both question visibility (``show_if``) and price rules call
:meth:`ConditionEvaluator.evaluate`.  Evaluation never raises for a parsed
condition: an unanswered question, or a non-numeric answer compared with a
numeric operator, simply makes the condition false.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from quote_rulesets.models.condition import (
    BetweenCondition,
    Condition,
    ContainsCondition,
    EqualsCondition,
    GreaterThanCondition,
    LessThanCondition,
)

logger = logging.getLogger(__name__)


def _as_number(answer: Any) -> float | None:
    """Coerce an answer to float, or None if it is not numeric.

    Numeric strings (e.g. "15" from a text input) are accepted; booleans are
    not, even though ``bool`` subclasses ``int``.
    """
    if isinstance(answer, bool):
        return None
    if isinstance(answer, (int, float)):
        return float(answer)
    if isinstance(answer, str):
        try:
            return float(answer.strip())
        except ValueError:
            return None
    return None


def _equals(answer: Any, value: Any) -> bool:
    # Booleans only ever equal booleans (True == 1 in Python)
    if isinstance(answer, bool) or isinstance(value, bool):
        return isinstance(answer, bool) and isinstance(value, bool) and answer is value
    # A text-input "3" equals the number 3, as with the numeric operators
    if isinstance(answer, str) != isinstance(value, str):
        num = _as_number(answer)
        return num is not None and num == _as_number(value)
    return answer == value


class ConditionEvaluator:
    """Evaluates conditions against a mapping of question id → answer."""

    def evaluate(self, condition: Condition, answers: Mapping[str, Any]) -> bool:
        """Return True if *condition* is satisfied by *answers*.

        If the referenced question has not been answered yet (missing key or
        ``None``), the condition evaluates to False.
        """
        answer = answers.get(condition.question_id)
        if answer is None:
            return False

        if isinstance(condition, EqualsCondition):
            return self._eval_equals(answer, condition.value)
        if isinstance(condition, ContainsCondition):
            return self._eval_contains(answer, condition.value)
        if isinstance(condition, GreaterThanCondition):
            num = _as_number(answer)
            return num is not None and num > condition.value
        if isinstance(condition, LessThanCondition):
            num = _as_number(answer)
            return num is not None and num < condition.value
        if isinstance(condition, BetweenCondition):
            num = _as_number(answer)
            return num is not None and condition.value.min <= num <= condition.value.max

        logger.warning("Unknown condition operator: %r", getattr(condition, "operator", condition))
        return False

    # ------------------------------------------------------------------
    # Operator helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _eval_equals(answer: Any, value: Any) -> bool:
        """Structural equality; a multi-select answer matches any selected id."""
        if isinstance(answer, (list, tuple, set, frozenset)) and not isinstance(
            value, (list, tuple)
        ):
            return any(_equals(item, value) for item in answer)
        if isinstance(answer, (list, tuple)) and isinstance(value, (list, tuple)):
            # Compare selections as sets: order of selection is irrelevant
            return sorted(map(str, answer)) == sorted(map(str, value))
        return _equals(answer, value)

    @staticmethod
    def _eval_contains(answer: Any, value: Any) -> bool:
        """Element membership for lists; case-insensitive substring for text."""
        if isinstance(answer, (list, tuple, set, frozenset)):
            return any(_equals(item, value) for item in answer)

        needle = str(value).lower()
        if isinstance(answer, str):
            return needle in answer.lower()
        if isinstance(answer, dict):
            # Structured address / date-time: search its text parts
            return any(
                isinstance(part, str) and needle in part.lower()
                for part in answer.values()
            )
        return False


_default_evaluator = ConditionEvaluator()


def evaluate_condition(condition: Condition, answers: Mapping[str, Any]) -> bool:
    """Module-level shorthand for :meth:`ConditionEvaluator.evaluate`."""
    return _default_evaluator.evaluate(condition, answers)
