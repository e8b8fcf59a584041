"""
Pytest configuration for WHchecker tests

Forces the templated fallback (no Gemini calls) and resets shared state
between tests.
"""

import os

import pytest

# Must be set before whchecker.config is imported anywhere
os.environ["WHCHECKER_USE_LLM"] = "false"
os.environ.setdefault("WHCHECKER_LOG_LEVEL", "WARNING")


@pytest.fixture(autouse=True)
def _reset_shared_state():
    from whchecker.analysis.resolver import reset_resolver
    from whchecker.observability.telemetry import reset_counters, reset_latencies

    reset_resolver()
    reset_counters()
    reset_latencies()
    yield
    reset_resolver()


@pytest.fixture(scope="session")
def catalog():
    """The packaged rule catalog"""
    from whchecker.analysis.catalog import get_catalog

    return get_catalog()
