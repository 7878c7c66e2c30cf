"""Publish-time validation of quote forms and price guides.

Evaluation assumes a well-formed configuration: every condition references
an existing, strictly earlier question and compares it with a value of the
right shape.  These checks run when a form or guide is published, loaded
from a template, or received by the HTTP API; the evaluators themselves
never call them.

``collect_*_errors`` return a list of human-readable problems;
``validate_*`` raise :class:`ConfigurationError` carrying that list.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Mapping

from pydantic import ValidationError

from quote_rulesets.constants import CHOICE_TYPES, CONTAINS_TARGET_TYPES, NUMERIC_OPERATORS
from quote_rulesets.models.condition import Condition
from quote_rulesets.models.pricing import PriceGuide
from quote_rulesets.models.question import QuoteForm

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """A form or price guide definition is malformed."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or [message]
        super().__init__(message)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def pydantic_error_messages(exc: ValidationError) -> list[str]:
    """Flatten a pydantic ``ValidationError`` into "loc: msg" strings."""
    out = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        out.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    return out


def parse_form(data: Mapping[str, Any]) -> QuoteForm:
    """Build a :class:`QuoteForm` from a raw mapping (e.g. parsed YAML/JSON).

    Raises:
        ConfigurationError: if the mapping does not describe a valid form.
    """
    try:
        return QuoteForm.model_validate(data)
    except ValidationError as exc:
        errors = pydantic_error_messages(exc)
        raise ConfigurationError(f"Invalid form definition: {errors[0]}", errors) from exc


def parse_guide(data: Mapping[str, Any]) -> PriceGuide:
    """Build a :class:`PriceGuide` from a raw mapping.

    Raises:
        ConfigurationError: on unparseable rules, actions or conditions.
    """
    try:
        return PriceGuide.model_validate(data)
    except ValidationError as exc:
        errors = pydantic_error_messages(exc)
        raise ConfigurationError(f"Invalid price guide: {errors[0]}", errors) from exc


# ---------------------------------------------------------------------------
# Shared condition checks
# ---------------------------------------------------------------------------

def _is_option_id(value: Any, target) -> bool:
    # Condition values come from JSON, so nested lists/dicts are possible
    return isinstance(value, str) and value in target.option_ids()


def _condition_shape_errors(where: str, cond: Condition, target) -> list[str]:
    """Check the operator / value shape against the referenced question type."""
    errors: list[str] = []
    op = cond.operator
    qtype = target.type

    if op in NUMERIC_OPERATORS and qtype != "number":
        errors.append(
            f"{where}: operator '{op}' needs a number question, "
            f"but '{target.id}' is {qtype}"
        )
    elif op == "contains" and qtype not in CONTAINS_TARGET_TYPES:
        errors.append(
            f"{where}: operator 'contains' cannot target {qtype} question '{target.id}'"
        )
    elif op == "equals":
        if qtype == "yes_no" and not isinstance(cond.value, bool):
            errors.append(f"{where}: yes/no question '{target.id}' must be compared with true/false")
        elif qtype in CHOICE_TYPES:
            values = cond.value if isinstance(cond.value, list) else [cond.value]
            unknown = [v for v in values if not _is_option_id(v, target)]
            if unknown:
                errors.append(
                    f"{where}: {unknown!r} is not an option of '{target.id}'"
                )

    if op == "contains" and qtype == "multi_select" and not _is_option_id(cond.value, target):
        errors.append(f"{where}: {cond.value!r} is not an option of '{target.id}'")

    return errors


# ---------------------------------------------------------------------------
# Forms
# ---------------------------------------------------------------------------

def _reaches(start: str, target: str, deps: dict[str, str]) -> bool:
    """True if following show_if references from *start* arrives at *target*."""
    seen: set[str] = set()
    cur = start
    while cur in deps and cur not in seen:
        seen.add(cur)
        cur = deps[cur]
        if cur == target:
            return True
    return False


def collect_form_errors(form: QuoteForm) -> list[str]:
    """Return every configuration problem found in *form* (empty if valid)."""
    errors: list[str] = []

    id_counts = Counter(q.id for q in form.questions)
    for qid, n in id_counts.items():
        if n > 1:
            errors.append(f"Duplicate question id '{qid}' ({n} occurrences)")

    order_counts = Counter(q.order for q in form.questions)
    for order, n in order_counts.items():
        if n > 1:
            errors.append(f"Duplicate display order {order} ({n} questions)")

    by_id = {q.id: q for q in form.questions}
    deps = {q.id: q.show_if.question_id for q in form.questions if q.show_if is not None}

    for q in form.ordered_questions:
        if q.show_if is None:
            continue
        where = f"Question '{q.id}' show_if"
        ref = q.show_if.question_id
        target = by_id.get(ref)

        if target is None:
            errors.append(f"{where} references unknown question '{ref}'")
            continue
        if ref == q.id:
            errors.append(f"{where} references itself")
            continue
        if target.order >= q.order:
            if _reaches(ref, q.id, deps):
                errors.append(f"{where}: cyclic visibility dependency with '{ref}'")
            else:
                errors.append(
                    f"{where} references later question '{ref}' "
                    f"(order {target.order} >= {q.order})"
                )
            continue

        errors.extend(_condition_shape_errors(where, q.show_if, target))

    return errors


def validate_form(form: QuoteForm) -> QuoteForm:
    """Raise :class:`ConfigurationError` unless *form* is publishable."""
    errors = collect_form_errors(form)
    if errors:
        logger.info("form %s rejected: %d problem(s)", form.id, len(errors))
        raise ConfigurationError(
            f"Form '{form.id}' has {len(errors)} configuration error(s)", errors
        )
    return form


# ---------------------------------------------------------------------------
# Price guides
# ---------------------------------------------------------------------------

def collect_guide_errors(guide: PriceGuide, form: QuoteForm | None = None) -> list[str]:
    """Return every configuration problem found in *guide*.

    When *form* is given, rule conditions are also checked against its
    questions.
    """
    errors: list[str] = []

    id_counts = Counter(r.id for r in guide.rules)
    for rid, n in id_counts.items():
        if n > 1:
            errors.append(f"Duplicate rule id '{rid}' ({n} occurrences)")

    for index, rule in enumerate(guide.rules, start=1):
        if not rule.name.strip():
            errors.append(f"Rule {index} ('{rule.id}'): name is required")

    if form is None:
        return errors

    if guide.form_id is not None and guide.form_id != form.id:
        errors.append(f"Price guide belongs to form '{guide.form_id}', not '{form.id}'")

    by_id = {q.id: q for q in form.questions}
    for rule in guide.rules:
        where = f"Rule '{rule.id}' condition"
        ref = rule.condition.question_id
        target = by_id.get(ref)
        if target is None:
            errors.append(f"{where} references unknown question '{ref}'")
            continue
        errors.extend(_condition_shape_errors(where, rule.condition, target))

    return errors


def validate_guide(guide: PriceGuide, form: QuoteForm | None = None) -> PriceGuide:
    """Raise :class:`ConfigurationError` unless *guide* is publishable."""
    errors = collect_guide_errors(guide, form)
    if errors:
        logger.info("price guide %s rejected: %d problem(s)", guide.id, len(errors))
        raise ConfigurationError(
            f"Price guide '{guide.id}' has {len(errors)} configuration error(s)", errors
        )
    return guide
