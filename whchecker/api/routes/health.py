"""Health check endpoint for WHchecker API.

Provides a liveness check for Cloud Run monitoring.
"""

from __future__ import annotations

import os
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter

from whchecker.config import APP_VERSION, ENV, NOTIFICATION_SCORING, USE_LLM

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Health check endpoint.

    Returns service status, version, and credential readiness for
    Vertex AI / Gemini (does not make an API call, only checks presence).
    """
    has_api_key = bool(os.getenv("GOOGLE_API_KEY"))
    has_project = bool(os.getenv("GOOGLE_CLOUD_PROJECT"))

    return {
        "status": "healthy",
        "service": "WHchecker API",
        "version": APP_VERSION,
        "environment": ENV,
        "timestamp": datetime.now(UTC).isoformat(),
        "notification_scoring": NOTIFICATION_SCORING,
        "llm": {
            "enabled": USE_LLM,
            "ready": USE_LLM and (has_api_key or has_project),
            "google_api_key": has_api_key,
            "google_cloud_project": has_project,
        },
    }
