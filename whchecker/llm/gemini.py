"""
Gemini model factory for the rewrite suggester.

The suggester needs exactly one kind of model: Gemini Flash bound to the
rewrite system instruction. get_rewrite_model() builds it once per
instruction and caches it.

Backend selection (checked on each cache miss, env read fresh so a late
load_dotenv() still counts):
    vertexai  GOOGLE_CLOUD_PROJECT set and google-cloud-aiplatform importable
    genai     otherwise, when GOOGLE_API_KEY is set (local development)
Neither available → GeminiInitializationError, which the suggester reports
as "generation unavailable".
"""

from __future__ import annotations

import os
from functools import lru_cache

from whchecker.infrastructure.settings import GEMINI_LOCATION, GEMINI_MODEL, GOOGLE_CLOUD_PROJECT
from whchecker.observability.logging import get_logger

logger = get_logger(__name__)

VERTEX = "vertexai"
GENAI = "genai"


class GeminiInitializationError(RuntimeError):
    """Raised when no Gemini backend can be configured."""


def _project() -> str | None:
    return os.getenv("GOOGLE_CLOUD_PROJECT") or GOOGLE_CLOUD_PROJECT


def credentials_available() -> bool:
    """Whether either backend has something to authenticate with (no API call)."""
    return bool(_project() or os.getenv("GOOGLE_API_KEY"))


def select_backend() -> str:
    """
    Pick the backend for the next model.

    Raises:
        GeminiInitializationError: No project and no API key
    """
    if _project():
        try:
            import vertexai  # noqa: F401
        except ImportError:
            logger.info("GOOGLE_CLOUD_PROJECT set but Vertex AI SDK missing; trying API key")
        else:
            return VERTEX

    if not os.getenv("GOOGLE_API_KEY"):
        raise GeminiInitializationError(
            "No Gemini credential: set GOOGLE_CLOUD_PROJECT (Vertex AI) or GOOGLE_API_KEY"
        )
    return GENAI


def _vertex_model(system_instruction: str | None):
    import vertexai
    from vertexai.generative_models import GenerativeModel

    location = os.getenv("GEMINI_LOCATION") or GEMINI_LOCATION
    vertexai.init(project=_project(), location=location)
    return GenerativeModel(GEMINI_MODEL, system_instruction=system_instruction)


def _genai_model(system_instruction: str | None):
    try:
        import google.generativeai as genai
    except ImportError as e:
        raise GeminiInitializationError("google-generativeai is not installed") from e

    genai.configure(api_key=os.environ["GOOGLE_API_KEY"])
    return genai.GenerativeModel(GEMINI_MODEL, system_instruction=system_instruction)


@lru_cache(maxsize=4)
def get_rewrite_model(system_instruction: str | None = None):
    """
    Gemini model bound to a system instruction, cached per instruction.

    Raises:
        GeminiInitializationError: If no backend can be configured
    """
    backend = select_backend()
    try:
        if backend == VERTEX:
            model = _vertex_model(system_instruction)
        else:
            model = _genai_model(system_instruction)
    except GeminiInitializationError:
        raise
    except Exception as e:
        logger.error("Failed to initialize Gemini (%s): %s", backend, e)
        raise GeminiInitializationError(f"Failed to initialize Gemini ({backend}): {e}") from e

    logger.info("Initialized Gemini rewrite model: backend=%s model=%s", backend, GEMINI_MODEL)
    return model
