"""Quote-form constants shared across the SDK.

These values are referenced by the models, the estimate aggregator, the
formatting helpers and the template store.  They mirror the conventions
encoded in the YAML templates under ``v1/templates/``.

Several constants can be overridden via environment variables so that
deployments can adjust defaults without code changes.
"""

import os

# Currency applied to price guides that do not name one.
# Overridable via DEFAULT_CURRENCY env var.
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "AUD")

DEFAULT_DISCLAIMER = (
    "This is an estimate only based on the information provided. "
    "Final price will be confirmed after inspection."
)

# Share of form questions that must have contributed a fired rule for an
# estimate to count as high / medium confidence.
CONFIDENCE_HIGH_RATIO = float(os.getenv("CONFIDENCE_HIGH_RATIO", "0.7"))
CONFIDENCE_MEDIUM_RATIO = float(os.getenv("CONFIDENCE_MEDIUM_RATIO", "0.3"))

# Human-readable labels for API responses.
QUESTION_TYPE_LABELS: dict[str, str] = {
    "yes_no": "Yes/No",
    "single_choice": "Single Choice",
    "multi_select": "Multiple Choice",
    "short_text": "Short Text",
    "long_text": "Long Text",
    "number": "Number",
    "address": "Address",
    "date_time": "Date/Time",
}

ESTIMATE_MODE_LABELS: dict[str, str] = {
    "internal": "Internal Only (not shown to customer)",
    "range": "Price Range (e.g., $150-$250)",
    "starting_from": "Starting From (e.g., From $150)",
    "disabled": "Disabled (no estimates)",
}

INDUSTRY_OPTIONS: list[dict[str, str]] = [
    {"value": "plumbing", "label": "Plumbing", "icon": "wrench"},
    {"value": "electrical", "label": "Electrical", "icon": "zap"},
    {"value": "cleaning", "label": "Cleaning", "icon": "sparkles"},
    {"value": "lawn", "label": "Lawn & Garden", "icon": "leaf"},
    {"value": "handyman", "label": "Handyman", "icon": "hammer"},
    {"value": "painting", "label": "Painting", "icon": "paintbrush"},
    {"value": "removalist", "label": "Removalist", "icon": "truck"},
    {"value": "beauty", "label": "Beauty/Salon", "icon": "star"},
]

CURRENCY_SYMBOLS: dict[str, str] = {
    "AUD": "$",
    "USD": "$",
    "NZD": "$",
    "GBP": "£",
    "EUR": "€",
}

# Question types grouped by the answer shape they produce.
CHOICE_TYPES: set[str] = {"single_choice", "multi_select"}
TEXT_TYPES: set[str] = {"short_text", "long_text"}

# Which referenced question types each condition operator may target.
# Used by publish-time validation only; evaluation never consults it.
NUMERIC_OPERATORS: set[str] = {"greater_than", "less_than", "between"}
CONTAINS_TARGET_TYPES: set[str] = {"multi_select", "address"} | TEXT_TYPES
