"""Phrase Matcher - verbatim lookup of ambiguous and negative phrases."""

from __future__ import annotations

from whchecker.analysis.catalog import Catalog, get_catalog
from whchecker.analysis.models import PhraseCategory, RuleMatch


class PhraseMatcher:
    """
    Scans raw message text against the phrase catalogs.

    Matching is exact substring containment: no normalization, no stemming.
    A phrase occurring several times still yields a single RuleMatch, and
    output keeps catalog order (ambiguous entries before negative ones).
    """

    def __init__(self, catalog: Catalog | None = None):
        self.catalog = catalog or get_catalog()

    def match(self, text: str) -> list[RuleMatch]:
        text = text or ""
        return [
            RuleMatch(phrase=entry.phrase, category=entry.category, reason=entry.reason)
            for entry in self.catalog.phrases
            if entry.phrase in text
        ]


def phrases_in(matches: list[RuleMatch], category: PhraseCategory) -> list[str]:
    """Phrases of one category, preserving match order."""
    return [m.phrase for m in matches if m.category == category]
