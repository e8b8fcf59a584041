"""
Domain models (Pydantic v2) for the WHchecker analysis pipeline.

The AnalysisResult schema is the wire contract handed to chat-platform
callers. Field names serialize in camelCase (hasIssues, issueCount,
improvedPoints, shouldNotify); Python code uses the snake_case attributes.
Every model is frozen: results are built once per message and never mutated.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class Dimension(str, Enum):
    """One of the six 5W1H dimensions. Declaration order is the output order."""

    WHO = "who"
    WHAT = "what"
    WHEN = "when"
    WHERE = "where"
    WHY = "why"
    HOW = "how"


DIMENSION_ORDER: tuple[Dimension, ...] = tuple(Dimension)


class PhraseCategory(str, Enum):
    """Phrase catalog a RuleMatch came from."""

    AMBIGUOUS = "ambiguous"
    NEGATIVE = "negative"


class WireModel(BaseModel):
    """Base model: frozen, camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys; absent optionals are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class MissingItem(WireModel):
    key: Dimension
    reason: str


class RuleMatch(WireModel):
    phrase: str = Field(min_length=1)
    category: PhraseCategory
    reason: str


class Suggestion(WireModel):
    rewrite: str = Field(min_length=1)
    rationale: list[str] = Field(default_factory=list)
    improved_points: list[Dimension] = Field(default_factory=list)


class NotificationScore(WireModel):
    score: int = Field(ge=0, le=10)
    should_notify: bool
    reasons: list[str] = Field(default_factory=list)


class Summary(WireModel):
    has_issues: bool
    issue_count: int = Field(ge=0)


class AnalysisResult(WireModel):
    missing: list[MissingItem]
    matches: list[RuleMatch]
    summary: Summary
    suggestion: Suggestion | None = None
    notification: NotificationScore | None = None

    @model_validator(mode="after")
    def _check_invariants(self) -> AnalysisResult:
        expected = len(self.missing) + len(self.matches)
        if self.summary.issue_count != expected:
            raise ValueError(
                f"summary.issueCount={self.summary.issue_count} but found {expected} findings"
            )
        if self.summary.has_issues != (expected > 0):
            raise ValueError("summary.hasIssues disagrees with issueCount")

        keys = [item.key for item in self.missing]
        if len(set(keys)) != len(keys):
            raise ValueError("missing contains a dimension more than once")
        if keys != sorted(keys, key=DIMENSION_ORDER.index):
            raise ValueError("missing is not in dimension order")
        return self

    @classmethod
    def empty(cls) -> AnalysisResult:
        """Canonical no-issues result, also used when assembly fails validation."""
        return cls(
            missing=[],
            matches=[],
            summary=Summary(has_issues=False, issue_count=0),
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
