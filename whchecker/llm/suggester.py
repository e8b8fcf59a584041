"""
Gemini Suggester - generative rewrite backend for the Suggestion Resolver.

Implements the SuggestionGenerator protocol. The Gemini SDK is synchronous,
so the call runs in a worker thread and is bounded by asyncio.wait_for; a
caller that gives up cancels the await without affecting later calls.

Failure policy (the resolver converts all of these into a fallback):
- no credential or SDK          → GenerationUnavailableError
- timeout / transport failure   → TimeoutError / ConnectionError / OSError
- empty or malformed response    → GenerationError

Cost: one Gemini Flash call per analyzed message (short prompt, ~200 tokens out)
"""

from __future__ import annotations

import asyncio
import json
import re

from pydantic import ValidationError

from whchecker.analysis.models import Suggestion
from whchecker.config import GEMINI_MODEL, LLM_INPUT_MAX_CHARS, LLM_TIMEOUT_SECONDS
from whchecker.contracts.generation import (
    GenerationError,
    GenerationRequest,
    GenerationUnavailableError,
)
from whchecker.llm.gemini import GeminiInitializationError, credentials_available
from whchecker.llm.prompts import get_rewrite_prompt, get_rewrite_system
from whchecker.llm.retry import call_llm
from whchecker.observability.logging import get_logger
from whchecker.observability.telemetry import counter, log_event
from whchecker.utils.redaction import sanitize_for_prompt

logger = get_logger(__name__)

# Keys the model may return; anything else in its JSON is ignored
_SUGGESTION_KEYS = ("rewrite", "rationale", "improvedPoints", "improved_points")


def parse_suggestion(response_text: str | None) -> Suggestion | None:
    """
    Parse a model response into a Suggestion.

    Returns None for an empty response.

    Raises:
        GenerationError: If the response is not JSON or fails schema validation
    """
    if not response_text or not response_text.strip():
        return None

    json_text = response_text.strip()
    if json_text.startswith("```"):
        # Remove markdown code fence
        json_text = re.sub(r"^```(?:json)?\n?", "", json_text)
        json_text = re.sub(r"\n?```$", "", json_text)

    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        counter("suggester.parse_error")
        raise GenerationError(f"Response is not JSON: {e}") from e

    if not isinstance(data, dict):
        counter("suggester.parse_error")
        raise GenerationError(f"Expected a JSON object, got {type(data).__name__}")

    try:
        return Suggestion.model_validate({k: v for k, v in data.items() if k in _SUGGESTION_KEYS})
    except ValidationError as e:
        counter("suggester.schema_error")
        raise GenerationError(f"Response failed Suggestion schema: {e.error_count()} error(s)") from e


class GeminiSuggester:
    """
    Produces rewrite suggestions with Gemini.

    Args:
        timeout: Seconds to wait for the model (including retries)
    """

    def __init__(self, timeout: float = LLM_TIMEOUT_SECONDS):
        self.timeout = timeout

    def build_prompt(self, request: GenerationRequest) -> str:
        """Render the rewrite prompt with sanitized inputs."""
        return get_rewrite_prompt(
            text=sanitize_for_prompt(request.text, max_length=LLM_INPUT_MAX_CHARS),
            missing_keys=[key.value for key in request.missing_keys],
            ambiguous_phrases=list(request.ambiguous_phrases),
            negative_phrases=list(request.negative_phrases),
        )

    def _call(self, prompt: str) -> str:
        try:
            return call_llm(
                prompt,
                counter_prefix="suggester",
                system_instruction=get_rewrite_system(),
            )
        except GeminiInitializationError as e:
            raise GenerationUnavailableError(str(e)) from e

    async def generate(self, request: GenerationRequest) -> Suggestion | None:
        """
        Generate a rewrite suggestion for one message.

        Side Effects:
            - Calls Gemini API (network, billed)
            - Increments suggester.* telemetry counters
        """
        if not credentials_available():
            counter("suggester.unavailable")
            raise GenerationUnavailableError("GOOGLE_CLOUD_PROJECT / GOOGLE_API_KEY not set")

        prompt = self.build_prompt(request)
        try:
            response_text = await asyncio.wait_for(
                asyncio.to_thread(self._call, prompt), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            counter("suggester.timeout")
            raise TimeoutError(f"Gemini did not answer within {self.timeout}s") from e

        suggestion = parse_suggestion(response_text)
        if suggestion is None:
            counter("suggester.empty")
            return None

        counter("suggester.success")
        log_event(
            "suggester.result",
            model=GEMINI_MODEL,
            rewrite_chars=len(suggestion.rewrite),
            improved_points=[key.value for key in suggestion.improved_points],
        )
        return suggestion
