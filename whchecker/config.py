"""Centralized configuration for the WHchecker backend.

Re-exports everything from whchecker.infrastructure.settings so callers have a
single import point, then adds typed constants for the LLM collaborator,
escalation scoring and the API. Environment variable overrides use safe
defaults so the analyzer runs without extra env configuration.
"""

from __future__ import annotations

import os

from whchecker.infrastructure.settings import *  # noqa: F401, F403  re-export existing

# --- App ---
APP_VERSION: str = "1.0.0"

# --- LLM ---
LLM_TIMEOUT_SECONDS: int = int(os.getenv("WHCHECKER_LLM_TIMEOUT", "20"))
LLM_MAX_RETRIES: int = int(os.getenv("WHCHECKER_LLM_MAX_RETRIES", "2"))
LLM_INPUT_MAX_CHARS: int = 2000

# --- Escalation scoring ---
SCORE_MIN: int = 0
SCORE_MAX: int = 10
NOTIFY_SCORE_THRESHOLD: int = int(os.getenv("WHCHECKER_NOTIFY_THRESHOLD", "3"))

# --- API ---
API_MAX_TEXT_LENGTH: int = 4000
