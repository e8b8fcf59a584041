"""
Presence Detector - which 5W1H dimensions a message already conveys.

Each dimension has an ordered list of regex patterns in the rule catalog; a
dimension is present if ANY of its patterns matches the message with all
whitespace removed (so a line break inserted mid-word still matches).

Short social messages ("ありがとうございます", "了解です", ...) are never flagged:
if the trimmed text opens with a casual opener the detector reports nothing
missing, even when a request follows the greeting. That is a deliberately
coarse policy.
"""

from __future__ import annotations

import re

from whchecker.analysis.catalog import Catalog, get_catalog
from whchecker.analysis.models import MissingItem

_WHITESPACE = re.compile(r"\s+")


class PresenceDetector:
    """Reports the 5W1H dimensions a message leaves out."""

    def __init__(self, catalog: Catalog | None = None):
        self.catalog = catalog or get_catalog()

    def detect(self, text: str) -> list[MissingItem]:
        """
        Return one MissingItem per absent dimension, in fixed dimension order.

        Side Effects: None (pure function)
        """
        text = text or ""
        if self.catalog.starts_casual(text):
            return []

        compact = _WHITESPACE.sub("", text)
        return [
            MissingItem(key=rule.key, reason=rule.reason)
            for rule in self.catalog.presence
            if not rule.present_in(compact)
        ]
