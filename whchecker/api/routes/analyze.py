"""Stateless analysis endpoints for WHchecker API.

Runs chat messages through the analysis pipeline (detector -> matcher ->
scorer -> suggestion) and returns the wire-form AnalysisResult. No message
text or result is stored.
"""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from whchecker.analysis.models import AnalysisResult
from whchecker.analysis.resolver import SuggestionResolver, get_resolver, should_surface
from whchecker.config import API_MAX_TEXT_LENGTH
from whchecker.observability.logging import get_logger
from whchecker.observability.telemetry import counter

router = APIRouter(prefix="/api", tags=["analyze"])
logger = get_logger(__name__)

API_BATCH_SIZE_MAX = 50


# ============================================================================
# Request Models
# ============================================================================


class AnalyzeRequest(BaseModel):
    """A single chat message to analyze."""

    text: str = Field(..., max_length=API_MAX_TEXT_LENGTH)


class AnalyzeBatchRequest(BaseModel):
    """Several independent messages, analyzed concurrently."""

    texts: list[str] = Field(..., min_length=1, max_length=API_BATCH_SIZE_MAX)


def _response(result: AnalysisResult) -> dict[str, Any]:
    body = result.to_wire()
    body["shouldSurface"] = should_surface(result)
    return body


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/analyze")
async def analyze_message(
    request: AnalyzeRequest,
    resolver: SuggestionResolver = Depends(get_resolver),
) -> dict[str, Any]:
    """Analyze one message.

    The response is the AnalysisResult (camelCase) plus shouldSurface, the
    decision a chat integration should act on.
    """
    counter("api.analyze.requests")
    result = await resolver.analyze(request.text)
    return _response(result)


@router.post("/analyze/batch")
async def analyze_batch(
    request: AnalyzeBatchRequest,
    resolver: SuggestionResolver = Depends(get_resolver),
) -> dict[str, Any]:
    """Analyze several messages; results come back in request order."""
    too_long = [i for i, text in enumerate(request.texts) if len(text) > API_MAX_TEXT_LENGTH]
    if too_long:
        raise HTTPException(
            status_code=422,
            detail=f"texts exceed {API_MAX_TEXT_LENGTH} characters at positions {too_long}",
        )

    counter("api.analyze_batch.requests")
    results = await asyncio.gather(*(resolver.analyze(text) for text in request.texts))
    logger.info("Analyzed batch of %d message(s)", len(results))
    return {"results": [_response(result) for result in results]}
