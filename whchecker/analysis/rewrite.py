"""
Rule-based rewrite used when no generated suggestion is available.

Fully deterministic: the same findings always produce byte-identical output,
and nothing here calls an external service.

Shape of the rewrite:

    <original text, trimmed>
    - <instruction clause for each missing dimension, in dimension order>
    例）<fixed illustrative example, only when a dimension is missing>
"""

from __future__ import annotations

from whchecker.analysis.catalog import Catalog, get_catalog
from whchecker.analysis.models import (
    DIMENSION_ORDER,
    MissingItem,
    PhraseCategory,
    RuleMatch,
    Suggestion,
)
from whchecker.analysis.phrases import phrases_in


class FallbackRewriter:
    """Builds a templated Suggestion from detector and matcher findings."""

    def __init__(self, catalog: Catalog | None = None):
        self.catalog = catalog or get_catalog()
        self.templates = self.catalog.rewrite

    def build_rewrite(self, text: str, missing: list[MissingItem]) -> str:
        present = {item.key for item in missing}
        clauses = [self.templates.clauses[key] for key in DIMENSION_ORDER if key in present]

        rewrite = (text or "").strip()
        if clauses:
            bullets = "\n".join(f"- {clause}" for clause in clauses)
            rewrite = f"{rewrite}\n{bullets}\n{self.templates.example}"
        return rewrite.strip()

    def build_rationale(self, missing: list[MissingItem], matches: list[RuleMatch]) -> list[str]:
        labels = self.templates.rationale_labels
        hints: list[str] = []

        keys = "・".join(item.key.value.upper() for item in missing)
        if keys:
            hints.append(f"{labels.get('missing', 'missing')}: {keys}")

        for category in (PhraseCategory.AMBIGUOUS, PhraseCategory.NEGATIVE):
            quoted = "、".join(f"「{phrase}」" for phrase in phrases_in(matches, category))
            if quoted:
                hints.append(f"{labels.get(category.value, category.value)}: {quoted}")

        return hints

    def suggest(
        self, text: str, missing: list[MissingItem], matches: list[RuleMatch]
    ) -> Suggestion | None:
        """
        Templated suggestion, or None when there is nothing to improve.

        Side Effects: None (pure function)
        """
        if not missing and not matches:
            return None

        return Suggestion(
            rewrite=self.build_rewrite(text, missing),
            rationale=self.build_rationale(missing, matches),
            improved_points=[item.key for item in missing],
        )
