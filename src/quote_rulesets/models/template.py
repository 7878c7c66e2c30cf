"""Industry form templates from ``v1/templates/*.yaml``.

A template bundles a starter question list with suggested price rules and a
disclaimer.  Businesses copy a template into their own form and guide; the
template itself is never evaluated directly.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .pricing import PriceRule
from .question import Question


class QuoteFormTemplate(BaseModel):
    """Starter quote form for one industry (e.g. plumbing)."""

    id: str
    name: str
    industry: str
    description: Optional[str] = None
    icon: Optional[str] = None
    questions: List[Question]
    price_guide_template: List[PriceRule] = Field(default_factory=list)
    disclaimer_template: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0
