"""
In-memory counters and latency samples for the analysis pipeline.

Nothing is exported; the API, the resolver and the Gemini suggester record
here and tests read the values back. Counter families in use:

    analysis.generation.<status>   one per analyze(), status from GenerationStatus
    analysis.fallback              templated rewrite served
    analysis.validation_error      result replaced by AnalysisResult.empty()
    suggester.<outcome>            Gemini outcomes (success, timeout, rate_limited, ...)
    api.<route>.requests           HTTP request counts

Callers pass identifiers and counts only, never the chat text itself.
"""

from __future__ import annotations

import contextlib
import time
from collections.abc import Iterator
from typing import Any

from whchecker.observability.logging import get_logger

logger = get_logger("whchecker.telemetry")

_COUNTERS: dict[str, int] = {}
_LATENCIES_MS: dict[str, list[float]] = {}


def log_event(event_name: str, **fields: Any) -> None:
    """Log one structured event as sorted key=value pairs."""
    rendered = " ".join(f"{key}={fields[key]}" for key in sorted(fields))
    logger.info("event=%s %s", event_name, rendered)


def counter(name: str, increment: int = 1) -> int:
    """Add to a counter and return its new value."""
    value = _COUNTERS.get(name, 0) + increment
    _COUNTERS[name] = value
    logger.debug("counter=%s value=%s", name, value)
    return value


def get_counter(name: str) -> int:
    return _COUNTERS.get(name, 0)


@contextlib.contextmanager
def time_block(metric_name: str) -> Iterator[None]:
    """Record the block's wall time in milliseconds, also when it raises."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        _LATENCIES_MS.setdefault(metric_name, []).append(elapsed_ms)
        logger.debug("timing=%s ms=%.2f", metric_name, elapsed_ms)


def get_latency_stats(metric_name: str) -> dict[str, float]:
    """Sample count plus p50/p95/max in milliseconds (zeros when unsampled)."""
    samples = sorted(_LATENCIES_MS.get(metric_name, []))
    if not samples:
        return {"count": 0, "p50": 0.0, "p95": 0.0, "max": 0.0}

    count = len(samples)
    return {
        "count": count,
        "p50": samples[count // 2],
        "p95": samples[min(int(count * 0.95), count - 1)],
        "max": samples[-1],
    }


def reset_counters() -> None:
    _COUNTERS.clear()


def reset_latencies() -> None:
    _LATENCIES_MS.clear()
