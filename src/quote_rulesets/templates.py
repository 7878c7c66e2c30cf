"""TemplateStore — loads industry quote-form templates from ``v1/templates/``.

Each YAML file holds one :class:`QuoteFormTemplate`.  The store is loaded once
at startup; every template's questions and suggested rules are validated at
load time so a broken template never reaches evaluation.

Usage::

    store = TemplateStore()         # defaults to v1/templates relative to repo root
    store.load()                    # parse all YAML files

    tpl = store.get("plumbing")
    form = store.build_form("plumbing", form_id="form_123")
    guide = store.build_guide("plumbing", guide_id="guide_123", form=form)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml
from pydantic import ValidationError

from quote_rulesets.constants import DEFAULT_DISCLAIMER
from quote_rulesets.models.pricing import EstimateMode, PriceGuide, PriceRule
from quote_rulesets.models.question import QuoteForm
from quote_rulesets.models.template import QuoteFormTemplate
from quote_rulesets.validation import (
    ConfigurationError,
    collect_form_errors,
    collect_guide_errors,
    pydantic_error_messages,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------

def find_repo_root(start: Optional[Path] = None) -> Path:
    """Walk upwards from *start* to find the repo root (dir with pyproject.toml or .git).

    Falls back to cwd if no marker is found.
    """
    p = (start or Path(__file__).resolve()).parent
    for parent in [p, *p.parents]:
        if (parent / "pyproject.toml").exists() or (parent / ".git").exists():
            return parent
    return Path.cwd()


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def generate_suggested_rules(
    template_rules: Iterable[PriceRule], questions: Iterable
) -> list[PriceRule]:
    """Keep rules whose condition references an existing question.

    Surviving rules are renumbered ``order = 1..n`` in their original
    sequence, so a business that deleted template questions gets a clean,
    contiguous rule list.
    """
    question_ids = {q.id for q in questions}
    kept = [r for r in template_rules if r.condition.question_id in question_ids]
    return [r.model_copy(update={"order": i}) for i, r in enumerate(kept, start=1)]


# ---------------------------------------------------------------------------
# TemplateStore
# ---------------------------------------------------------------------------

class TemplateStore:
    """Loads all YAML templates and provides typed lookup.

    Attributes populated after :meth:`load`:

        templates — dict[id, QuoteFormTemplate], in file-name order
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = find_repo_root() / "v1" / "templates"
        self._base = Path(template_dir)

        # Populated by load()
        self.templates: dict[str, QuoteFormTemplate] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Parse and validate every ``*.yaml`` file in the template directory.

        Raises:
            FileNotFoundError: if the template directory does not exist.
            ConfigurationError: if a template is malformed or duplicated.
        """
        if not self._base.is_dir():
            raise FileNotFoundError(f"Missing template directory: {self._base}")

        for path in sorted(self._base.glob("*.yaml")):
            tpl = self._parse(path, load_yaml(path))
            if tpl.id in self.templates:
                raise ConfigurationError(f"Duplicate template id '{tpl.id}' in {path.name}")
            self.templates[tpl.id] = tpl

        logger.info("TemplateStore loaded: %d templates from %s", len(self.templates), self._base)

    @staticmethod
    def _parse(path: Path, raw: Any) -> QuoteFormTemplate:
        try:
            tpl = QuoteFormTemplate.model_validate(raw)
        except ValidationError as exc:
            errors = pydantic_error_messages(exc)
            raise ConfigurationError(f"Invalid template {path.name}: {errors[0]}", errors) from exc

        # Validate as if the template were a published form + guide
        form = QuoteForm(id=tpl.id, title=tpl.name, questions=tpl.questions)
        guide = PriceGuide(id=tpl.id, form_id=tpl.id, rules=tpl.price_guide_template)
        errors = collect_form_errors(form) + collect_guide_errors(guide, form)
        if errors:
            raise ConfigurationError(
                f"Template {path.name} has {len(errors)} configuration error(s)", errors
            )
        return tpl

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def get(self, template_id: str) -> QuoteFormTemplate:
        """Look up a template by id.

        Raises:
            KeyError: if the template is not found.
        """
        return self.templates[template_id]

    def list_templates(self, industry: str | None = None) -> list[QuoteFormTemplate]:
        """Active templates, optionally for one industry, by ``sort_order``."""
        items = [
            t for t in self.templates.values()
            if t.is_active and (industry is None or t.industry == industry)
        ]
        return sorted(items, key=lambda t: t.sort_order)

    def build_form(
        self,
        template_id: str,
        form_id: str,
        *,
        title: str | None = None,
        slug: str | None = None,
    ) -> QuoteForm:
        """Create a business form from a template's questions."""
        tpl = self.get(template_id)
        return QuoteForm(
            id=form_id,
            slug=slug,
            title=title or tpl.name,
            description=tpl.description,
            questions=[q.model_copy(deep=True) for q in tpl.questions],
            disclaimer=tpl.disclaimer_template,
        )

    def build_guide(
        self,
        template_id: str,
        guide_id: str,
        form: QuoteForm,
        *,
        estimate_mode: EstimateMode = "internal",
        show_to_customer: bool = False,
        base_price: float | None = None,
        base_callout_fee: float | None = None,
    ) -> PriceGuide:
        """Create a price guide for *form* seeded with the template's rules.

        Rules referencing questions no longer on *form* are dropped.
        """
        tpl = self.get(template_id)
        return PriceGuide(
            id=guide_id,
            form_id=form.id,
            estimate_mode=estimate_mode,
            show_to_customer=show_to_customer,
            base_price=base_price,
            base_callout_fee=base_callout_fee,
            rules=generate_suggested_rules(tpl.price_guide_template, form.questions),
            disclaimer=tpl.disclaimer_template or DEFAULT_DISCLAIMER,
        )
