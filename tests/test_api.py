"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

import api.main as server
from coldguard.config import LLMSettings
from coldguard.generator import EmailGenerator
from coldguard.guard import ColdEmailGuard
from coldguard.metrics import MetricsCollector


@pytest.fixture
def client(monkeypatch, clock):
    metrics = MetricsCollector()
    monkeypatch.delenv("COLDGUARD_API_KEY", raising=False)
    monkeypatch.setattr(server, "metrics", metrics)
    monkeypatch.setattr(server, "guard", ColdEmailGuard(clock=clock, metrics=metrics))
    monkeypatch.setattr(server, "generator", EmailGenerator(LLMSettings(), metrics=metrics))
    return TestClient(server.app)


class TestGuardEndpoints:
    """Test permission and usage endpoints."""

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_permission_allowed(self, client):
        response = client.post("/permission", json={"user_id": "u1", "requested_credits": 3})

        assert response.status_code == 200
        assert response.json()["allowed"] is True

    def test_permission_denied(self, client):
        response = client.post("/permission", json={"user_id": "u1", "requested_credits": 11})

        body = response.json()
        assert body["allowed"] is False
        assert body["reason"] == "daily credit limit exceeded"

    def test_usage_round_trip(self, client):
        recorded = client.post("/usage", json={"user_id": "u1", "credits_used": 4}).json()
        stats = client.get("/usage/u1").json()

        assert recorded["credits_used_today"] == 4
        assert stats["remaining_credits_today"] == 6
        assert stats["emails_sent_today"] == 1

    def test_reserve_records_when_allowed(self, client):
        response = client.post("/usage/reserve", json={"user_id": "u1", "credits_used": 4})

        assert response.status_code == 200
        assert response.json()["allowed"] is True
        assert client.get("/usage/u1").json()["credits_used_today"] == 4

    def test_reserve_denied_is_429(self, client):
        """A denied reservation records nothing."""
        response = client.post("/usage/reserve", json={"user_id": "u1", "credits_used": 11})

        assert response.status_code == 429
        assert response.json()["reason"] == "daily credit limit exceeded"
        assert client.get("/usage/u1").json()["emails_sent_today"] == 0

    def test_reserve_rate_limited_sets_retry_after(self, client):
        for _ in range(5):
            client.post("/usage/reserve", json={"user_id": "u1", "credits_used": 0})

        response = client.post("/usage/reserve", json={"user_id": "u1", "credits_used": 0})

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"

    def test_negative_credits_rejected(self, client):
        response = client.post("/usage", json={"user_id": "u1", "credits_used": -1})

        assert response.status_code == 422

    def test_validate(self, client):
        response = client.post("/validate", json={"subject": "", "body": "hello"})

        assert response.json() == {"valid": False, "errors": ["Subject is required"]}


class TestDraftEndpoint:
    def test_fallback_draft_without_api_key(self, client):
        response = client.post(
            "/drafts",
            json={
                "job_title": "Data Engineer",
                "company": "Acme",
                "user": {"full_name": "Ada", "skills": ["Python"]},
                "tone": "warm",
            },
        )

        assert response.status_code == 200
        draft = response.json()
        assert draft["subject"] == "Application for Data Engineer at Acme"
        assert draft["metadata"]["model"] == "fallback"
        assert draft["metadata"]["source"] == "fallback"


class TestComposeEndpoints:
    """Test compose and deliverability endpoints."""

    def test_compose(self, client):
        response = client.post(
            "/compose",
            json={"provider": "Gmail", "to": ["A@Example.com"], "subject": "S", "body": "B"},
        )

        body = response.json()
        assert response.status_code == 200
        assert "su=S" in body["url"]
        assert body["length"] == len(body["url"])
        assert server.metrics.counters["compose_urls_gmail"] == 1

    def test_compose_error_is_422(self, client):
        response = client.post("/compose", json={"provider": "gmail", "to": []})

        assert response.status_code == 422
        assert "recipient" in response.json()["detail"]

    def test_unknown_provider_is_422(self, client):
        response = client.post("/compose", json={"provider": "pigeon", "to": ["a@b.com"]})

        assert response.status_code == 422

    def test_deliverability(self, client):
        response = client.post(
            "/deliverability",
            json={"subject": "Quick question about the role", "body": "a" * 500},
        )

        assert response.json() == {"score": 100}


class TestApiKey:
    def test_key_required_when_configured(self, client, monkeypatch):
        monkeypatch.setenv("COLDGUARD_API_KEY", "secret")

        assert client.post("/validate", json={}).status_code == 401
        assert client.post(
            "/validate", json={}, headers={"X-API-Key": "secret"}
        ).status_code == 200

    def test_health_is_open(self, client, monkeypatch):
        monkeypatch.setenv("COLDGUARD_API_KEY", "secret")

        assert client.get("/health").status_code == 200
