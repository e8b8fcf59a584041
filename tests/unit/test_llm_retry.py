"""
Tests for the retrying Gemini call and the model factory.

A fake model stands in for Gemini; tenacity's backoff is replaced with
wait_none() so retries run immediately.
"""

import sys
from unittest.mock import MagicMock, patch

import pytest
from google.api_core.exceptions import (
    DeadlineExceeded,
    InternalServerError,
    ResourceExhausted,
    ServiceUnavailable,
)
from tenacity import wait_none

from whchecker.llm import gemini
from whchecker.llm.gemini import GeminiInitializationError, get_rewrite_model, select_backend
from whchecker.llm.retry import call_llm
from whchecker.observability.telemetry import get_counter

fast_call_llm = call_llm.retry_with(wait=wait_none())


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModel:
    """Raises the queued exceptions in order, then answers."""

    def __init__(self, *failures, text='{"rewrite": "x"}'):
        self.failures = list(failures)
        self.text = text
        self.calls = []

    def generate_content(self, prompt, generation_config=None):
        self.calls.append((prompt, generation_config))
        if self.failures:
            raise self.failures.pop(0)
        return FakeResponse(self.text)


@pytest.fixture
def fake_model(monkeypatch):
    def _install(*failures, text='{"rewrite": "x"}'):
        model = FakeModel(*failures, text=text)
        monkeypatch.setattr("whchecker.llm.retry.get_rewrite_model", lambda system_instruction=None: model)
        return model

    return _install


@pytest.fixture
def no_credentials(monkeypatch):
    monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.setattr(gemini, "GOOGLE_CLOUD_PROJECT", None)
    get_rewrite_model.cache_clear()
    yield
    get_rewrite_model.cache_clear()


class TestCallLlm:
    def test_service_unavailable_is_retried(self, fake_model):
        model = fake_model(ServiceUnavailable("busy"), text='{"rewrite": "ok"}')

        text = fast_call_llm("prompt", counter_prefix="suggester", system_instruction="sys")

        assert text == '{"rewrite": "ok"}'
        assert len(model.calls) == 2
        assert get_counter("suggester.service_unavailable") == 1

    def test_json_output_sets_mime_type(self, fake_model):
        model = fake_model()
        fast_call_llm("prompt", counter_prefix="suggester")
        _, config = model.calls[0]
        assert config["response_mime_type"] == "application/json"

    def test_deadline_exceeded_surfaces_as_timeout_after_retries(self, fake_model):
        model = fake_model(DeadlineExceeded("slow"), DeadlineExceeded("slow"))

        with pytest.raises(TimeoutError):
            fast_call_llm("prompt", counter_prefix="suggester")

        assert len(model.calls) == 2
        assert get_counter("suggester.timeout") == 2

    @pytest.mark.parametrize(
        "error, expected, counter_name",
        [
            (ResourceExhausted("quota"), OSError, "suggester.rate_limited"),
            (InternalServerError("oops"), ConnectionError, "suggester.internal_error"),
        ],
    )
    def test_transient_errors_are_mapped(self, fake_model, error, expected, counter_name):
        fake_model(error, error)

        with pytest.raises(expected):
            fast_call_llm("prompt", counter_prefix="suggester")

        assert get_counter(counter_name) == 2

    def test_other_errors_are_not_retried(self, fake_model):
        model = fake_model(ValueError("bad request"))

        with pytest.raises(ValueError):
            fast_call_llm("prompt", counter_prefix="suggester")

        assert len(model.calls) == 1


class TestModelFactory:
    def test_no_project_or_key_raises(self, no_credentials):
        assert gemini.credentials_available() is False
        with pytest.raises(GeminiInitializationError):
            get_rewrite_model("sys")

    def test_api_key_selects_genai(self, no_credentials, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "test-key")
        assert select_backend() == gemini.GENAI

    def test_project_selects_vertex(self, no_credentials, monkeypatch):
        monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "demo-project")
        with patch.dict(sys.modules, {"vertexai": MagicMock()}):
            assert select_backend() == gemini.VERTEX

    def test_genai_model_is_cached_per_instruction(self, no_credentials, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "test-key")
        fake_genai = MagicMock()

        with patch.object(gemini, "_genai_model", wraps=lambda si: fake_genai.GenerativeModel(si)) as build:
            first = get_rewrite_model("sys")
            second = get_rewrite_model("sys")
            get_rewrite_model("other")

        assert first is second
        assert build.call_count == 2

    def test_backend_failure_becomes_initialization_error(self, no_credentials, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "test-key")

        with patch.object(gemini, "_genai_model", side_effect=RuntimeError("bad key")):
            with pytest.raises(GeminiInitializationError, match="bad key"):
                get_rewrite_model("sys")
