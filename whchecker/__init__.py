"""WHchecker - 5W1H and tone checks for Japanese business chat messages"""

from __future__ import annotations

__version__ = "1.0.0"


# Lazy imports so lightweight modules don't pull in the catalog or LLM stack
def __getattr__(name: str):
    """
    Lazy imports to avoid loading heavy dependencies when only importing lightweight modules.
    """
    if name in ("analyze", "analyze_sync", "should_surface", "SuggestionResolver"):
        from whchecker.analysis import resolver

        return getattr(resolver, name)

    if name == "AnalysisResult":
        from whchecker.analysis.models import AnalysisResult

        return AnalysisResult

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "AnalysisResult",
    "SuggestionResolver",
    "analyze",
    "analyze_sync",
    "should_surface",
]
