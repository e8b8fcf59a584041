"""
Integration tests for the WHchecker HTTP API.

The shared resolver is overridden with one that never calls Gemini, so the
responses are fully deterministic.
"""

import pytest
from fastapi.testclient import TestClient

from whchecker.analysis.resolver import SuggestionResolver, get_resolver
from whchecker.api.app import app
from whchecker.config import API_MAX_TEXT_LENGTH, ENV


@pytest.fixture
def client():
    app.dependency_overrides[get_resolver] = lambda: SuggestionResolver(generator=None)
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "WHchecker API"
        assert data["environment"] == ENV
        assert data["llm"]["enabled"] is False
        assert data["llm"]["ready"] is False

    def test_root_lists_endpoints(self, client):
        data = client.get("/").json()
        assert data["endpoints"]["analyze"] == "/api/analyze"


class TestAnalyze:
    def test_request_message(self, client):
        response = client.post("/api/analyze", json={"text": "明日までに資料を送ってください"})
        assert response.status_code == 200

        data = response.json()
        assert [item["key"] for item in data["missing"]] == ["who", "where", "why", "how"]
        assert data["matches"] == []
        assert data["summary"] == {"hasIssues": True, "issueCount": 4}
        assert data["notification"]["score"] == 6
        assert data["notification"]["shouldNotify"] is True
        assert data["suggestion"]["improvedPoints"] == ["who", "where", "why", "how"]
        assert data["shouldSurface"] is True

    def test_negative_phrase(self, client):
        data = client.post("/api/analyze", json={"text": "前も言ったよね"}).json()
        assert data["matches"] == [
            {"phrase": "前も言ったよね", "category": "negative", "reason": "責められている印象"}
        ]
        assert "否定: 「前も言ったよね」" in data["suggestion"]["rationale"]

    def test_greeting_has_no_issues(self, client):
        data = client.post("/api/analyze", json={"text": "ありがとうございます"}).json()
        assert data["summary"] == {"hasIssues": False, "issueCount": 0}
        assert "suggestion" not in data
        assert data["notification"] == {
            "score": 0,
            "shouldNotify": False,
            "reasons": ["カジュアル・明確なメッセージ"],
        }
        assert data["shouldSurface"] is False

    def test_missing_text_is_sanitized_422(self, client):
        response = client.post("/api/analyze", json={})
        assert response.status_code == 422
        assert response.json()["invalid_fields"] == ["text"]

    def test_text_too_long(self, client):
        text = "あ" * (API_MAX_TEXT_LENGTH + 1)
        response = client.post("/api/analyze", json={"text": text})
        assert response.status_code == 422
        assert text not in response.text


class TestAnalyzeBatch:
    def test_results_in_request_order(self, client):
        texts = ["前も言ったよね", "ありがとうございます", "明日までに資料を送ってください"]
        response = client.post("/api/analyze/batch", json={"texts": texts})
        assert response.status_code == 200

        counts = [r["summary"]["issueCount"] for r in response.json()["results"]]
        assert counts == [7, 0, 4]

    def test_empty_batch_rejected(self, client):
        response = client.post("/api/analyze/batch", json={"texts": []})
        assert response.status_code == 422

    def test_overlong_item_rejected(self, client):
        texts = ["資料", "あ" * (API_MAX_TEXT_LENGTH + 1)]
        response = client.post("/api/analyze/batch", json={"texts": texts})
        assert response.status_code == 422
        assert "positions [1]" in response.json()["detail"]
