"""
WHchecker analysis core - 5W1H presence, phrase matching, escalation scoring
and suggestion resolution for Japanese business chat messages.
"""

from whchecker.analysis.models import (
    DIMENSION_ORDER,
    AnalysisResult,
    Dimension,
    MissingItem,
    NotificationScore,
    PhraseCategory,
    RuleMatch,
    Suggestion,
    Summary,
)

__all__ = [
    "DIMENSION_ORDER",
    "AnalysisResult",
    "Dimension",
    "MissingItem",
    "NotificationScore",
    "PhraseCategory",
    "RuleMatch",
    "Suggestion",
    "Summary",
]
