"""FormEvaluator — computes which questions of a quote form are visible.

Questions are processed in ascending display order in a single pass.  A
question without ``show_if`` is always visible; a conditional question is
visible iff its condition holds against the answers of the strictly earlier
questions that are themselves visible.

Publish-time validation (``quote_rulesets.validation``) guarantees that a
condition only references an earlier question, so no fixpoint iteration or
cycle detection is needed here.  The answer set is never mutated: stale
answers to questions that have since become invisible are simply not read.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from quote_rulesets.evaluator import ConditionEvaluator
from quote_rulesets.models.question import Question, QuoteForm

logger = logging.getLogger(__name__)


def _is_answered(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return True


class FormEvaluator:
    """Evaluates question visibility for a form snapshot."""

    def __init__(self, evaluator: ConditionEvaluator | None = None) -> None:
        self._evaluator = evaluator or ConditionEvaluator()

    def visible_questions(
        self, form: QuoteForm, answers: Mapping[str, Any]
    ) -> list[Question]:
        """Return the visible questions of *form* in display order.

        Args:
            form: the form snapshot
            answers: question id → raw answer value (may be partial, and may
                     contain stale answers to now-invisible questions)

        Returns:
            A subsequence of ``form.ordered_questions``.
        """
        visible: list[Question] = []
        # Only answers from earlier visible questions are ever exposed to
        # a later question's condition.
        seen: dict[str, Any] = {}

        for q in form.ordered_questions:
            if q.show_if is None or self._evaluator.evaluate(q.show_if, seen):
                visible.append(q)
                if q.id in answers:
                    seen[q.id] = answers[q.id]
            else:
                logger.debug("form %s: question %s hidden", form.id, q.id)

        return visible

    def visible_question_ids(
        self, form: QuoteForm, answers: Mapping[str, Any]
    ) -> list[str]:
        return [q.id for q in self.visible_questions(form, answers)]

    def relevant_answers(
        self, form: QuoteForm, answers: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Answers restricted to currently visible questions.

        Answers to invisible or unknown questions are dropped.  The input
        mapping is left untouched.
        """
        visible_ids = set(self.visible_question_ids(form, answers))
        return {qid: value for qid, value in answers.items() if qid in visible_ids}

    def missing_required(
        self, form: QuoteForm, answers: Mapping[str, Any]
    ) -> list[str]:
        """Ids of visible required questions that have no usable answer."""
        return [
            q.id
            for q in self.visible_questions(form, answers)
            if q.required and not _is_answered(answers.get(q.id))
        ]


_default_form_evaluator = FormEvaluator()


def visible_questions(form: QuoteForm, answers: Mapping[str, Any]) -> list[Question]:
    """Module-level shorthand for :meth:`FormEvaluator.visible_questions`."""
    return _default_form_evaluator.visible_questions(form, answers)
