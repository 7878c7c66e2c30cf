#!/usr/bin/env python3
"""Simulate a customer filling in an industry quote form, end-to-end.

Walks a template's questions in display order, choosing an answer for each
question that is visible *at that point*, then runs the estimate for a
guide seeded from the template's suggested rules and prints every fired
rule, warning and the customer-facing text.

By default answers are **randomised** (``--random``, on by default) so each
run explores a different path through the visibility conditions and price
rules.  Use ``--no-random`` for a deterministic walk (first option, lower
bound, etc.).

Usage::

    # Default run (random template + random answers)
    python scripts/simulate_quote.py

    # Deterministic run of the plumbing template
    python scripts/simulate_quote.py -t plumbing --no-random

    # Show the estimate as a customer would see a range
    python scripts/simulate_quote.py -t cleaning --mode range --base-price 0

    # List available templates
    python scripts/simulate_quote.py --list-templates
"""

from __future__ import annotations

import argparse
import json
import random
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

# ---------------------------------------------------------------------------
# Ensure src/ is importable when running from a checkout.
# ---------------------------------------------------------------------------
_REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_REPO_ROOT / "src"))

from quote_rulesets.estimate import EstimateAggregator  # noqa: E402
from quote_rulesets.form import FormEvaluator  # noqa: E402
from quote_rulesets.formatting import (  # noqa: E402
    estimate_confidence,
    format_estimate_for_customer,
    format_estimate_for_internal,
)
from quote_rulesets.templates import TemplateStore  # noqa: E402

# Pool of free-text answers for --random mode.
_RANDOM_TEXT_POOL = [
    "Water pooling under the kitchen sink",
    "Not sure, it started yesterday",
    "Urgent please, tenants moving in Friday",
    "Gas hot water system, about 12 years old",
    "",
]

_RANDOM_ADDRESS_POOL = [
    "12 Smith St, Fitzroy VIC 3065",
    {"street": "4/88 Beach Rd", "suburb": "Bondi", "postcode": "2026"},
    "Unit 3, 101 George St, Brisbane",
]


# ---------------------------------------------------------------------------
# Answer generation
# ---------------------------------------------------------------------------

def answer_for_question(q, rng: random.Random | None) -> Any:
    """Pick an answer based on the question type.

    With *rng* None the deterministic strategy is used (first option,
    lower bound, ``True`` for yes/no).
    """
    qtype = q.type

    if qtype == "yes_no":
        return rng.choice([True, False]) if rng else True

    if qtype == "single_choice":
        return rng.choice(q.options).id if rng else q.options[0].id

    if qtype == "multi_select":
        if rng:
            k = rng.randint(1, len(q.options))
            return [o.id for o in rng.sample(q.options, k)]
        return [q.options[0].id]

    if qtype == "number":
        lo = int(q.min) if q.min is not None else 0
        hi = int(q.max) if q.max is not None else 10
        return rng.randint(lo, hi) if rng else lo

    if qtype == "address":
        return rng.choice(_RANDOM_ADDRESS_POOL) if rng else _RANDOM_ADDRESS_POOL[0]

    if qtype == "date_time":
        return {"date": "2026-11-02", "time": rng.choice(["morning", "afternoon"]) if rng else "morning"}

    return rng.choice(_RANDOM_TEXT_POOL) if rng else _RANDOM_TEXT_POOL[0]


def walk_form(form, rng: random.Random | None) -> dict[str, Any]:
    """Answer the form one question at a time, re-evaluating visibility."""
    evaluator = FormEvaluator()
    answers: dict[str, Any] = {}
    while True:
        pending = [
            q for q in evaluator.visible_questions(form, answers)
            if q.id not in answers
        ]
        if not pending:
            return answers
        q = pending[0]
        answers[q.id] = answer_for_question(q, rng)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def print_answers(console: Console, form, answers: dict[str, Any]) -> None:
    table = Table(title=f"Answers — {form.title}", show_lines=True)
    table.add_column("ID", style="dim", width=5)
    table.add_column("Question", min_width=30)
    table.add_column("Type", width=14)
    table.add_column("Answer", min_width=20)

    for q in form.ordered_questions:
        if q.id in answers:
            shown = json.dumps(answers[q.id], ensure_ascii=False)
        else:
            shown = "[dim](hidden)[/]"
        table.add_row(q.id, q.question, q.type, shown)
    console.print(table)


def print_estimate(console: Console, form, estimate) -> None:
    table = Table(title="Applied Rules", show_lines=True)
    table.add_column("Rule", min_width=20)
    table.add_column("Action", width=10)
    table.add_column("Adjustment", min_width=12)
    table.add_column("Note")

    for applied in estimate.applied_rules:
        adj = applied.adjustment
        adj_str = f"{adj.min:g} – {adj.max:g}" if hasattr(adj, "min") else f"{adj:g}"
        table.add_row(applied.rule_name, applied.action_type, adj_str, applied.note or "")
    console.print(table)

    for w in estimate.warnings:
        console.print(f"  [yellow]![/] {w.code}: {w.message}")

    customer = format_estimate_for_customer(estimate)
    console.print(f"\n  Mode:       {estimate.mode}")
    console.print(f"  Internal:   [bold]{format_estimate_for_internal(estimate) or '-'}[/]")
    console.print(f"  Customer:   [bold]{customer or '(not shown)'}[/]")
    console.print(f"  Confidence: {estimate_confidence(estimate, len(form.questions))}")
    if estimate.ignored_answers:
        console.print(f"  Ignored:    {', '.join(estimate.ignored_answers)}")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(
        description="Simulate a customer answering an industry quote form.",
    )
    parser.add_argument(
        "-t", "--template",
        default=None,
        help="Template id to simulate (default: random when --random, else the first template)",
    )
    parser.add_argument(
        "--list-templates",
        action="store_true",
        help="List all available templates and exit",
    )
    parser.add_argument(
        "--random",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Randomise answers (default: on). Use --no-random for deterministic mode.",
    )
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for reproducibility")
    parser.add_argument(
        "--mode",
        choices=["internal", "range", "starting_from", "disabled"],
        default="range",
        help="Estimate mode of the generated price guide (default: range)",
    )
    parser.add_argument("--base-price", type=float, default=None)
    parser.add_argument("--callout-fee", type=float, default=None)
    args = parser.parse_args()

    console = Console()
    store = TemplateStore()
    store.load()

    if args.list_templates:
        for i, tpl in enumerate(store.list_templates(), 1):
            console.print(f"  {i:2d}. {tpl.id:<12s} {tpl.name} ({len(tpl.questions)} questions)")
        sys.exit(0)

    rng = random.Random(args.seed) if args.random else None
    templates = store.list_templates()
    if args.template:
        template_id = args.template
    elif rng:
        template_id = rng.choice(templates).id
    else:
        template_id = templates[0].id

    if template_id not in store.templates:
        console.print(f"[red]Unknown template:[/] '{template_id}'")
        sys.exit(1)

    form = store.build_form(template_id, form_id=f"sim_{template_id}")
    guide = store.build_guide(
        template_id,
        guide_id=f"sim_{template_id}_guide",
        form=form,
        estimate_mode=args.mode,
        show_to_customer=True,
        base_price=args.base_price,
        base_callout_fee=args.callout_fee,
    )

    answers = walk_form(form, rng)
    print_answers(console, form, answers)

    estimate = EstimateAggregator().estimate(form, guide, answers)
    print_estimate(console, form, estimate)


if __name__ == "__main__":
    main()
