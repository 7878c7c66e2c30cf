"""PriceRuleEngine — folds matching price rules into a running price range.

Evaluation order:
    1. Start both bounds at ``base_price + base_callout_fee`` (absent → 0)
    2. Walk enabled rules by ``(order, insertion_index)``; for each rule
       whose condition holds, apply its action:
         - add:      number → both bounds; {min, max} → respective bound
         - multiply: scale both bounds
         - set_band: discard the running bounds and use the band; later
                     rules accumulate from this checkpoint, so the last
                     firing set_band is authoritative
    3. Clamp into the guide's global ``[min_price, max_price]``; an inverted
       window (min_price > max_price) collapses to its own midpoint
    4. If the clamped range is inverted, collapse to the midpoint and
       report a warning instead of failing

Arithmetic stays in float and is never rounded here; callers round at the
display boundary (see ``quote_rulesets.formatting``).
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from quote_rulesets.evaluator import ConditionEvaluator
from quote_rulesets.models.pricing import (
    AddAction,
    AppliedRule,
    EstimateWarning,
    MultiplyAction,
    PriceGuide,
    PriceRange,
    PriceRule,
    RuleEngineResult,
    SetBandAction,
    order_rules,
)

logger = logging.getLogger(__name__)


class PriceRuleEngine:
    """Applies price rules to an answer set."""

    def __init__(self, evaluator: ConditionEvaluator | None = None) -> None:
        self._evaluator = evaluator or ConditionEvaluator()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def apply(
        self,
        rules: Iterable[PriceRule],
        answers: Mapping[str, Any],
        *,
        base_price: float | None = None,
        base_callout_fee: float | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> RuleEngineResult:
        """Apply *rules* to *answers* starting from the base amount.

        Rules are ordered by ``(order, insertion_index)`` here; use
        :meth:`apply_guide` to reuse the order captured by a loaded guide.
        """
        start = (base_price or 0.0) + (base_callout_fee or 0.0)
        return self._fold(
            order_rules(list(rules)), answers, start, min_price, max_price
        )

    def apply_guide(
        self, guide: PriceGuide, answers: Mapping[str, Any]
    ) -> RuleEngineResult:
        """Apply a guide's rules, base amount and global clamps."""
        return self._fold(
            guide.ordered_rules,
            answers,
            guide.base_amount,
            guide.min_price,
            guide.max_price,
        )

    # ------------------------------------------------------------------
    # Folding
    # ------------------------------------------------------------------

    def _fold(
        self,
        ordered: list[PriceRule],
        answers: Mapping[str, Any],
        start: float,
        min_price: float | None,
        max_price: float | None,
    ) -> RuleEngineResult:
        lo = hi = float(start)
        applied: list[AppliedRule] = []

        for rule in ordered:
            if not rule.enabled:
                continue
            if not self._evaluator.evaluate(rule.condition, answers):
                continue

            lo, hi = self._apply_action(rule, lo, hi)
            applied.append(
                AppliedRule(
                    rule_id=rule.id,
                    rule_name=rule.name,
                    action_type=rule.action.type,
                    adjustment=rule.action.value,
                    note=rule.action.note,
                )
            )
            logger.debug(
                "rule %s (%s) fired → [%s, %s]", rule.id, rule.action.type, lo, hi
            )

        lo, hi, warnings = self._clamp(lo, hi, min_price, max_price)
        return RuleEngineResult(min=lo, max=hi, applied_rules=applied, warnings=warnings)

    @staticmethod
    def _apply_action(rule: PriceRule, lo: float, hi: float) -> tuple[float, float]:
        action = rule.action
        if isinstance(action, AddAction):
            if isinstance(action.value, PriceRange):
                return lo + action.value.min, hi + action.value.max
            return lo + action.value, hi + action.value
        if isinstance(action, MultiplyAction):
            return lo * action.value, hi * action.value
        if isinstance(action, SetBandAction):
            return action.value.min, action.value.max

        logger.warning("Unknown action type on rule %s: %r", rule.id, action)
        return lo, hi

    @staticmethod
    def _clamp(
        lo: float,
        hi: float,
        min_price: float | None,
        max_price: float | None,
    ) -> tuple[float, float, list[EstimateWarning]]:
        """Clamp into ``[min_price, max_price]``; collapse an inverted range."""
        warnings: list[EstimateWarning] = []

        if min_price is not None and max_price is not None and min_price > max_price:
            mid = (min_price + max_price) / 2
            msg = (
                f"global clamp is inverted (min_price {min_price} > max_price {max_price}); "
                f"collapsed to midpoint {mid}"
            )
            logger.warning(msg)
            warnings.append(EstimateWarning(code="clamp_inverted", message=msg))
            return mid, mid, warnings

        if min_price is not None:
            lo = max(lo, min_price)
            hi = max(hi, min_price)
        if max_price is not None:
            lo = min(lo, max_price)
            hi = min(hi, max_price)

        if lo > hi:
            mid = (lo + hi) / 2
            msg = (
                f"price range inverted after clamping ({lo} > {hi}); "
                f"collapsed to midpoint {mid}"
            )
            logger.warning(msg)
            warnings.append(EstimateWarning(code="range_collapsed", message=msg))
            lo = hi = mid

        return lo, hi, warnings


_default_engine = PriceRuleEngine()


def apply_rules(
    rules: Iterable[PriceRule],
    answers: Mapping[str, Any],
    **kwargs: Any,
) -> RuleEngineResult:
    """Module-level shorthand for :meth:`PriceRuleEngine.apply`."""
    return _default_engine.apply(rules, answers, **kwargs)
