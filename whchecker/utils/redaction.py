"""
Shared utilities for keeping message text out of logs and prompts.

Provides:
- redact(): Hash a message for correlation without exposure
- redact_message(): Short prefix + hash for debuggable log lines
- sanitize_for_prompt(): Remove potential prompt injection patterns
"""

from __future__ import annotations

import re
from hashlib import sha256

# Patterns that could be used for prompt injection
INJECTION_PATTERNS = [
    r"ignore\s+(previous|above|all)\s+instructions?",
    r"disregard\s+(previous|above|all)\s+instructions?",
    r"new\s+instructions?:",
    r"system\s*:",
    r"assistant\s*:",
    r"user\s*:",
    r"(これまで|以前|上記|前)の(指示|命令)を(すべて|全て)?無視",
    r"\[INST\]",
    r"\[/INST\]",
    r"<\|im_start\|>",
    r"<\|im_end\|>",
]
INJECTION_REGEX = re.compile("|".join(INJECTION_PATTERNS), re.IGNORECASE)


def redact(value: str | None) -> str:
    """
    Return a stable hash representation of a sensitive string.
    """
    if not value:
        return "hash:missing"
    digest = sha256(value.encode("utf-8")).hexdigest()[:12]
    return f"hash:{digest}"


def redact_message(text: str | None, max_length: int = 12) -> str:
    """
    Partially redact a chat message for logging.

    Shows the first N characters (whitespace collapsed) + hash suffix.

    Example:
        "明日までに資料を送ってください" -> "明日までに資料を送って... (h:3f9a1c)"
    """
    if not text or not text.strip():
        return "(empty)"

    flat = " ".join(text.split())
    visible = flat[:max_length] + "..." if len(flat) > max_length else flat
    digest = sha256(text.encode("utf-8")).hexdigest()[:6]
    return f"{visible} (h:{digest})"


def sanitize_for_prompt(text: str, max_length: int = 500) -> str:
    """
    Sanitize user-provided text before including in LLM prompts.

    Mitigates prompt injection by:
    1. Truncating to reasonable length
    2. Removing known injection patterns
    3. Dropping characters that might confuse prompt parsing

    Note:
        Slack mention markup (<@U123>) loses its angle brackets here; the
        mention itself survives as @U123.
    """
    if not text:
        return ""

    text = text[:max_length]
    text = INJECTION_REGEX.sub("[REDACTED]", text)
    text = re.sub(r"[<>{}|\\]", "", text)

    return text.strip()
