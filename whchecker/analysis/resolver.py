"""
Suggestion Resolver - end-to-end analysis of one chat message.

Implements the pipeline:
    PresenceDetector + PhraseMatcher → EscalationScorer → Generator → Fallback

and assembles the AnalysisResult. Two failure policies apply:

- Generation never fails the analysis. Whatever the backend does (missing
  credential, timeout, garbage JSON) becomes a typed GenerationOutcome, and
  anything but "ok" routes to the templated FallbackRewriter.
- The assembled result is re-validated against the schema. If it does not
  validate, the caller gets AnalysisResult.empty() instead of partial data.

Each analyze() call is independent; the resolver holds only read-only
collaborators, so one instance can serve concurrent messages.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum

from pydantic import ValidationError

from whchecker.analysis.catalog import Catalog, get_catalog
from whchecker.analysis.escalation import EscalationScorer
from whchecker.analysis.models import (
    AnalysisResult,
    MissingItem,
    NotificationScore,
    PhraseCategory,
    RuleMatch,
    Suggestion,
)
from whchecker.analysis.phrases import PhraseMatcher, phrases_in
from whchecker.analysis.presence import PresenceDetector
from whchecker.analysis.rewrite import FallbackRewriter
from whchecker.contracts.generation import (
    GenerationRequest,
    GenerationUnavailableError,
    SuggestionGenerator,
)
from whchecker.observability.logging import get_logger
from whchecker.observability.telemetry import counter, log_event, time_block
from whchecker.utils.redaction import redact, redact_message

logger = get_logger(__name__)


class GenerationStatus(str, Enum):
    OK = "ok"
    DISABLED = "disabled"  # no generator configured
    UNAVAILABLE = "unavailable"  # generator has no credential/SDK
    FAILED = "failed"  # generator raised
    EMPTY = "empty"  # generator returned nothing


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of one generation attempt."""

    status: GenerationStatus
    suggestion: Suggestion | None = None
    reason: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status is GenerationStatus.OK and self.suggestion is not None

    @classmethod
    def ok(cls, suggestion: Suggestion) -> GenerationOutcome:
        return cls(status=GenerationStatus.OK, suggestion=suggestion)

    @classmethod
    def failed(cls, status: GenerationStatus, reason: str) -> GenerationOutcome:
        return cls(status=status, reason=reason)


def build_generation_request(
    text: str, missing: list[MissingItem], matches: list[RuleMatch]
) -> GenerationRequest:
    return GenerationRequest(
        text=text,
        missing_keys=tuple(item.key for item in missing),
        ambiguous_phrases=tuple(phrases_in(matches, PhraseCategory.AMBIGUOUS)),
        negative_phrases=tuple(phrases_in(matches, PhraseCategory.NEGATIVE)),
    )


class SuggestionResolver:
    """
    Orchestrates detection, scoring, suggestion and validation for a message.

    Args:
        generator: Generative rewrite backend, or None to always use the
            templated fallback
        score_notifications: Whether results carry a NotificationScore
        catalog: Rule catalog (defaults to the process-wide catalog)

    Example:
        >>> resolver = SuggestionResolver(generator=None)
        >>> result = asyncio.run(resolver.analyze("明日までに資料を送ってください"))
        >>> [m.key.value for m in result.missing]
        ['who', 'where', 'why', 'how']
    """

    def __init__(
        self,
        generator: SuggestionGenerator | None = None,
        score_notifications: bool = True,
        catalog: Catalog | None = None,
    ):
        self.catalog = catalog or get_catalog()
        self.generator = generator
        self.score_notifications = score_notifications

        self.detector = PresenceDetector(self.catalog)
        self.matcher = PhraseMatcher(self.catalog)
        self.scorer = EscalationScorer(self.catalog)
        self.fallback = FallbackRewriter(self.catalog)

    async def generate(self, request: GenerationRequest) -> GenerationOutcome:
        """
        Attempt one generated suggestion. Never raises; cancellation
        (a BaseException) still propagates to the caller.

        Side Effects:
            - Awaits the generation backend (network-bound in production)
            - Increments analysis.generation.<status> counters
        """
        if self.generator is None:
            return GenerationOutcome.failed(GenerationStatus.DISABLED, "no generator configured")

        try:
            raw = await self.generator.generate(request)
            if raw is None:
                return GenerationOutcome.failed(GenerationStatus.EMPTY, "generator returned nothing")
            # Accepts a Suggestion or a plain mapping; anything else fails validation
            suggestion = Suggestion.model_validate(
                raw.model_dump() if isinstance(raw, Suggestion) else raw
            )
        except GenerationUnavailableError as e:
            logger.info("Suggestion generation unavailable: %s", e)
            return GenerationOutcome.failed(GenerationStatus.UNAVAILABLE, str(e))
        except ValidationError as e:
            logger.warning("Generated suggestion rejected by schema: %d error(s)", e.error_count())
            return GenerationOutcome.failed(
                GenerationStatus.FAILED, f"invalid suggestion: {e.error_count()} error(s)"
            )
        except Exception as e:
            logger.warning("Suggestion generation failed: %s: %s", type(e).__name__, e)
            return GenerationOutcome.failed(GenerationStatus.FAILED, f"{type(e).__name__}: {e}")

        return GenerationOutcome.ok(suggestion)

    def _fallback_suggestion(
        self, text: str, missing: list[MissingItem], matches: list[RuleMatch]
    ) -> Suggestion | None:
        try:
            return self.fallback.suggest(text, missing, matches)
        except ValidationError as e:
            # Only reachable with a catalog whose phrases are pure whitespace
            logger.error("Templated rewrite rejected by schema: %s", e)
            counter("analysis.fallback.invalid")
            return None

    def assemble(
        self,
        missing: list[MissingItem],
        matches: list[RuleMatch],
        suggestion: Suggestion | None,
        notification: NotificationScore | None,
    ) -> AnalysisResult:
        """
        Build and validate the result; substitute the empty result on failure.

        Side Effects:
            - Increments analysis.validation_error when substituting
        """
        try:
            issue_count = len(missing) + len(matches)
            payload = {
                "missing": [item.model_dump() for item in missing],
                "matches": [match.model_dump() for match in matches],
                "summary": {"has_issues": issue_count > 0, "issue_count": issue_count},
                "suggestion": suggestion.model_dump() if suggestion else None,
                "notification": notification.model_dump() if notification else None,
            }
            return AnalysisResult.model_validate(payload)
        except (ValidationError, AttributeError, TypeError) as e:
            logger.error("Analysis result failed validation, returning empty result: %s", e)
            counter("analysis.validation_error")
            return AnalysisResult.empty()

    async def analyze(self, text: str) -> AnalysisResult:
        """
        Analyze one message.

        Returns:
            A schema-valid AnalysisResult (the empty result if assembly failed)
        """
        text = text or ""
        with time_block("analysis.latency"):
            missing = self.detector.detect(text)
            matches = self.matcher.match(text)

            notification = None
            if self.score_notifications:
                notification = self.scorer.score(text, [m.key for m in missing], matches)

            outcome = await self.generate(build_generation_request(text, missing, matches))
            counter(f"analysis.generation.{outcome.status.value}")

            suggestion = outcome.suggestion if outcome.succeeded else None
            if suggestion is None and (missing or matches):
                suggestion = self._fallback_suggestion(text, missing, matches)
                counter("analysis.fallback")

            result = self.assemble(missing, matches, suggestion, notification)

        log_event(
            "analysis.completed",
            message=redact(text),
            issue_count=result.summary.issue_count,
            generation=outcome.status.value,
            score=result.notification.score if result.notification else None,
        )
        logger.debug("Analyzed %s -> %d issue(s)", redact_message(text), result.summary.issue_count)
        return result


def should_surface(result: AnalysisResult) -> bool:
    """
    Whether a chat layer should react to this result.

    Issues are required; when a notification score is present it must also
    say shouldNotify.
    """
    if not result.summary.has_issues:
        return False
    if result.notification is None:
        return True
    return result.notification.should_notify


def get_resolver() -> SuggestionResolver:
    """Get or create the shared SuggestionResolver configured from settings."""
    global _resolver_instance
    if _resolver_instance is None:
        from whchecker.config import NOTIFICATION_SCORING, USE_LLM

        generator: SuggestionGenerator | None = None
        if USE_LLM:
            from whchecker.llm.suggester import GeminiSuggester

            generator = GeminiSuggester()

        _resolver_instance = SuggestionResolver(
            generator=generator,
            score_notifications=NOTIFICATION_SCORING,
        )
        logger.info(
            "SuggestionResolver initialized (generator=%s, notification_scoring=%s)",
            type(generator).__name__ if generator else "none",
            NOTIFICATION_SCORING,
        )
    return _resolver_instance


def reset_resolver() -> None:
    """Drop the shared resolver so the next call re-reads settings (tests)."""
    global _resolver_instance
    _resolver_instance = None


_resolver_instance: SuggestionResolver | None = None


async def analyze(text: str) -> AnalysisResult:
    """Analyze a message with the shared resolver."""
    return await get_resolver().analyze(text)


def analyze_sync(text: str) -> AnalysisResult:
    """Synchronous wrapper for callers without an event loop."""
    return asyncio.run(analyze(text))
