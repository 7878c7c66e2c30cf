"""Display helpers for price estimates.

The engine keeps full float precision; rounding to whole currency units
happens only here, at the display boundary.
"""

from __future__ import annotations

import math
from typing import Literal

from quote_rulesets.constants import (
    CONFIDENCE_HIGH_RATIO,
    CONFIDENCE_MEDIUM_RATIO,
    CURRENCY_SYMBOLS,
)
from quote_rulesets.models.pricing import PriceEstimate

Confidence = Literal["high", "medium", "low"]


def currency_symbol(currency: str) -> str:
    """Symbol for a currency code; unknown codes are returned as-is."""
    return CURRENCY_SYMBOLS.get(currency.upper(), currency)


def format_amount(value: float, symbol: str) -> str:
    """Round half-up to a whole unit and add thousands separators."""
    return f"{symbol}{math.floor(value + 0.5):,}"


def format_estimate_for_customer(estimate: PriceEstimate) -> str:
    """Customer-facing text, or ``""`` when nothing should be shown.

    ``range`` → "Estimated range: $150 – $250" (or "Estimated: $150" when
    both bounds round to the same amount); ``starting_from`` → "Starting
    from $150"; ``internal``/``disabled``/hidden → "".
    """
    if estimate.mode == "disabled" or not estimate.show_to_customer:
        return ""
    if estimate.min is None or estimate.max is None:
        return ""

    symbol = currency_symbol(estimate.currency)
    lo = format_amount(estimate.min, symbol)
    hi = format_amount(estimate.max, symbol)

    if estimate.mode == "range":
        if lo == hi:
            return f"Estimated: {lo}"
        return f"Estimated range: {lo} – {hi}"
    if estimate.mode == "starting_from":
        return f"Starting from {lo}"
    return ""


def format_estimate_for_internal(estimate: PriceEstimate) -> str:
    """Business-facing text regardless of the customer visibility setting."""
    if estimate.min is None or estimate.max is None:
        return ""
    symbol = currency_symbol(estimate.currency)
    lo = format_amount(estimate.min, symbol)
    hi = format_amount(estimate.max, symbol)
    return lo if lo == hi else f"{lo} – {hi}"


def estimate_confidence(estimate: PriceEstimate, total_questions: int) -> Confidence:
    """Rough confidence based on how many rules contributed to the estimate."""
    used = len(estimate.applied_rules)
    if total_questions > 0 and used >= total_questions * CONFIDENCE_HIGH_RATIO:
        return "high"
    if total_questions > 0 and used >= total_questions * CONFIDENCE_MEDIUM_RATIO:
        return "medium"
    return "low"
