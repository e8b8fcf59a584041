"""
Type Contracts for WHchecker

Protocol-based contracts that decouple the analysis core from the generative
rewrite backend. The core depends on these protocols only; concrete backends
(whchecker.llm) implement them.
"""

from whchecker.contracts.generation import (
    GenerationError,
    GenerationRequest,
    GenerationUnavailableError,
    SuggestionGenerator,
)

__all__ = [
    "GenerationError",
    "GenerationRequest",
    "GenerationUnavailableError",
    "SuggestionGenerator",
]
