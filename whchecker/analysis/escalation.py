"""
Escalation Scorer - should a flagged message be actively surfaced?

Additive point scale over independent textual signals plus the detector and
matcher findings. Every rule is evaluated on its own and all applicable
rules fire; the total is clamped to [SCORE_MIN, SCORE_MAX].

    request marker          +3      ください / お願いします / いただけますか
    question mark           +1      ? / ？
    deadline or date        +2      まで / 期限 / 明日 / 12/5 / 17時
    mention                 +2      <@U123> / <!here> / @name
    casual indicators       -0..4   emoji, kaomoji, !!!, trailing ww (max 1 each)
    missing who/what/when   +1 each
    ambiguous phrase        +1      (once, however many matched)
    negative phrase         +1      (once, however many matched)

Messages opening with a casual/acknowledgment phrase exit early with score 0.
A message with no findings never notifies, whatever its score.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from whchecker.analysis.catalog import Catalog, get_catalog
from whchecker.analysis.models import Dimension, NotificationScore, PhraseCategory, RuleMatch
from whchecker.config import NOTIFY_SCORE_THRESHOLD, SCORE_MAX, SCORE_MIN

REQUEST_POINTS = 3
QUESTION_POINTS = 1
DEADLINE_POINTS = 2
MENTION_POINTS = 2
MISSING_POINTS = 1
CATEGORY_POINTS = 1

# Only these missing dimensions raise urgency
SCORED_DIMENSIONS: tuple[Dimension, ...] = (Dimension.WHO, Dimension.WHAT, Dimension.WHEN)


def _any_match(patterns: Iterable[re.Pattern], text: str) -> bool:
    return any(pattern.search(text) for pattern in patterns)


class EscalationScorer:
    """Turns a message and its findings into a bounded NotificationScore."""

    def __init__(self, catalog: Catalog | None = None, threshold: int = NOTIFY_SCORE_THRESHOLD):
        self.catalog = catalog or get_catalog()
        self.rules = self.catalog.escalation
        self.threshold = threshold

    def _reason(self, key: str) -> str:
        return self.rules.reasons.get(key, key)

    def casual_penalty(self, text: str) -> int:
        """Number of casual indicator groups present (0-4)."""
        return sum(
            1 for group in self.rules.casual_indicators.groups() if _any_match(group, text)
        )

    def score(
        self,
        text: str,
        missing_keys: Iterable[Dimension],
        matches: list[RuleMatch],
    ) -> NotificationScore:
        """
        Score one message.

        Side Effects: None (pure function)
        """
        text = text or ""
        if self.rules.starts_casual(text):
            return NotificationScore(
                score=SCORE_MIN,
                should_notify=False,
                reasons=[self._reason("casual_message")],
            )

        points = 0
        reasons: list[str] = []

        def add(amount: int, label: str) -> None:
            nonlocal points
            points += amount
            reasons.append(f"{label} {amount:+d}")

        if _any_match(self.rules.request_markers, text):
            add(REQUEST_POINTS, self._reason("request"))
        if _any_match(self.rules.question_marks, text):
            add(QUESTION_POINTS, self._reason("question"))
        if _any_match(self.rules.deadline_markers, text):
            add(DEADLINE_POINTS, self._reason("deadline"))
        if _any_match(self.rules.mention_markers, text):
            add(MENTION_POINTS, self._reason("mention"))

        penalty = self.casual_penalty(text)
        if penalty:
            add(-penalty, self._reason("casual_indicators"))

        missing = {Dimension(key) for key in missing_keys}
        for key in SCORED_DIMENSIONS:
            if key in missing:
                add(MISSING_POINTS, f"{key.value.upper()}{self._reason('missing')}")

        categories = {m.category for m in matches}
        for category in (PhraseCategory.AMBIGUOUS, PhraseCategory.NEGATIVE):
            if category in categories:
                add(CATEGORY_POINTS, self._reason(category.value))

        clamped = max(SCORE_MIN, min(SCORE_MAX, points))
        has_findings = bool(missing) or bool(matches)
        return NotificationScore(
            score=clamped,
            should_notify=has_findings and clamped >= self.threshold,
            reasons=reasons,
        )
