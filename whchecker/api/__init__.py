"""HTTP surface for chat-platform integrations."""

from __future__ import annotations


def main() -> None:
    """Run the API with uvicorn (console script: whchecker-api)."""
    import uvicorn

    from whchecker.config import API_HOST, API_PORT, LOG_LEVEL

    uvicorn.run("whchecker.api.app:app", host=API_HOST, port=API_PORT, log_level=LOG_LEVEL.lower())
