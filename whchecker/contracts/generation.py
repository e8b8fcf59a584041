"""
Suggestion Generation Protocol

Defines the interface between the Suggestion Resolver and any generative
rewrite backend (Gemini in production, fakes in tests).

Contract:
- generate() is awaited once per analyzed message
- returns a validated Suggestion, or None when the backend produced nothing
- raises GenerationUnavailableError when no credential/SDK is configured
- raises any other exception on failure; the resolver treats every raise as
  "no suggestion" and falls back to the templated rewrite
- the implementation bounds its own latency (the resolver imposes no timeout)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from whchecker.analysis.models import Dimension, Suggestion


class GenerationError(RuntimeError):
    """Backend answered, but the answer could not be used (empty, malformed, invalid)."""


class GenerationUnavailableError(GenerationError):
    """No credential or SDK for the generation backend. Expected, not alarming."""


@dataclass(frozen=True)
class GenerationRequest:
    """Structured prompt context for one message."""

    text: str
    missing_keys: tuple[Dimension, ...] = field(default_factory=tuple)
    ambiguous_phrases: tuple[str, ...] = field(default_factory=tuple)
    negative_phrases: tuple[str, ...] = field(default_factory=tuple)

    def as_payload(self) -> dict[str, object]:
        """camelCase dict matching the wire request shape."""
        return {
            "text": self.text,
            "missingKeys": [key.value for key in self.missing_keys],
            "ambiguousPhrases": list(self.ambiguous_phrases),
            "negativePhrases": list(self.negative_phrases),
        }


class SuggestionGenerator(Protocol):
    """Protocol for generative rewrite backends."""

    async def generate(self, request: GenerationRequest) -> Suggestion | None:
        """Produce a rewrite suggestion for the request.

        Args:
            request: Message text plus detector/matcher findings

        Returns:
            Validated Suggestion, or None if the backend returned nothing

        Raises:
            GenerationUnavailableError: Backend not configured
            Exception: Any other failure (network, timeout, parse)
        """
        ...
