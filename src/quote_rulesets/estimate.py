"""EstimateAggregator — turns a form, a price guide and answers into an estimate.

Steps:
    1. Disabled or inactive guide → short-circuit, no rule evaluation
    2. Compute visible questions and drop answers to hidden/unknown ones
    3. Run the price rule engine on the remaining answers
    4. Package the result with the guide's static presentation fields

The result is a pure function of its inputs: identical inputs produce an
identical :class:`PriceEstimate`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from quote_rulesets.form import FormEvaluator
from quote_rulesets.models.pricing import PriceEstimate, PriceGuide, PriceRule
from quote_rulesets.models.question import QuoteForm
from quote_rulesets.pricing import PriceRuleEngine
from quote_rulesets.validation import ConfigurationError

logger = logging.getLogger(__name__)


class EstimateAggregator:
    """Assembles the final :class:`PriceEstimate` for a customer's answers."""

    def __init__(
        self,
        form_evaluator: FormEvaluator | None = None,
        engine: PriceRuleEngine | None = None,
    ) -> None:
        self._forms = form_evaluator or FormEvaluator()
        self._engine = engine or PriceRuleEngine()

    def estimate(
        self,
        form: QuoteForm,
        guide: PriceGuide,
        answers: Mapping[str, Any],
    ) -> PriceEstimate:
        """Compute the estimate for *answers* under *guide*.

        Raises:
            ConfigurationError: if *guide* is bound to a different form.
        """
        if guide.form_id is not None and guide.form_id != form.id:
            raise ConfigurationError(
                f"Price guide '{guide.id}' belongs to form '{guide.form_id}', not '{form.id}'"
            )

        if guide.estimate_mode == "disabled" or not guide.is_active:
            return PriceEstimate(
                mode="disabled",
                disclaimer=guide.disclaimer,
                currency=guide.currency,
                show_to_customer=False,
                guide_version=guide.version,
            )

        relevant = self._forms.relevant_answers(form, answers)
        ignored = sorted(qid for qid in answers if qid not in relevant)
        if ignored:
            logger.debug("form %s: ignoring %d irrelevant answer(s)", form.id, len(ignored))

        result = self._engine.apply_guide(guide, relevant)

        return PriceEstimate(
            min=result.min,
            max=result.max,
            applied_rules=result.applied_rules,
            mode=guide.estimate_mode,
            disclaimer=guide.disclaimer,
            currency=guide.currency,
            show_to_customer=guide.show_to_customer,
            guide_version=guide.version,
            warnings=result.warnings,
            ignored_answers=ignored,
        )


_default_aggregator = EstimateAggregator()


def estimate(
    form: QuoteForm, guide: PriceGuide, answers: Mapping[str, Any]
) -> PriceEstimate:
    """Module-level shorthand for :meth:`EstimateAggregator.estimate`."""
    return _default_aggregator.estimate(form, guide, answers)


def try_rules(
    rules: list[PriceRule],
    sample_answers: Mapping[str, Any],
    base_price: float = 0,
    base_callout_fee: float = 0,
) -> PriceEstimate:
    """Try *rules* against sample answers without a real form or guide.

    Builds a throwaway ``range``-mode guide shown to the customer; every
    answer is considered relevant.
    """
    guide = PriceGuide(
        id="test",
        estimate_mode="range",
        show_to_customer=True,
        base_price=base_price,
        base_callout_fee=base_callout_fee,
        rules=rules,
        disclaimer="Test estimate",
    )
    result = PriceRuleEngine().apply_guide(guide, sample_answers)
    return PriceEstimate(
        min=result.min,
        max=result.max,
        applied_rules=result.applied_rules,
        mode=guide.estimate_mode,
        disclaimer=guide.disclaimer,
        currency=guide.currency,
        show_to_customer=True,
        guide_version=guide.version,
        warnings=result.warnings,
    )
