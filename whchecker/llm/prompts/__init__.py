"""
Prompt Management Module

Loads and manages LLM prompts from external text files.
This allows experimenting with prompt wording without modifying code.
"""

from __future__ import annotations

import os
from pathlib import Path

# Get the prompts directory
PROMPTS_DIR = Path(__file__).parent

# Set WHCHECKER_REWRITE_PROMPT to use an alternate prompt file (A/B testing)
REWRITE_PROMPT_NAME = os.getenv("WHCHECKER_REWRITE_PROMPT", "rewrite_prompt")
REWRITE_SYSTEM_NAME = "rewrite_system"

NONE_LABEL = "なし"


class PromptLoader:
    """Load and cache prompt templates from files"""

    def __init__(self):
        self._cache = {}

    def load_prompt(self, prompt_name: str) -> str:
        """
        Load a prompt template from file.

        Args:
            prompt_name: Name of the prompt file (without .txt extension)

        Returns:
            Prompt template string
        """
        if prompt_name not in self._cache:
            prompt_path = PROMPTS_DIR / f"{prompt_name}.txt"

            if not prompt_path.exists():
                raise FileNotFoundError(f"Prompt file not found: {prompt_path}")

            with open(prompt_path, encoding="utf-8") as f:
                self._cache[prompt_name] = f.read()

        return self._cache[prompt_name]

    def get_rewrite_system(self) -> str:
        return self.load_prompt(REWRITE_SYSTEM_NAME).strip()

    def get_rewrite_prompt(
        self,
        text: str,
        missing_keys: list[str],
        ambiguous_phrases: list[str],
        negative_phrases: list[str],
    ) -> str:
        """
        Get the rewrite prompt with findings injected.

        Empty finding lists render as "なし".
        """
        template = self.load_prompt(REWRITE_PROMPT_NAME)
        return template.format(
            text=text,
            missing_keys=", ".join(missing_keys) or NONE_LABEL,
            ambiguous_phrases=", ".join(ambiguous_phrases) or NONE_LABEL,
            negative_phrases=", ".join(negative_phrases) or NONE_LABEL,
        )


# Global instance
_loader = PromptLoader()


def get_rewrite_system() -> str:
    """Get rewrite system instruction (convenience function)"""
    return _loader.get_rewrite_system()


def get_rewrite_prompt(**kwargs) -> str:
    """Get rewrite prompt (convenience function)"""
    return _loader.get_rewrite_prompt(**kwargs)
