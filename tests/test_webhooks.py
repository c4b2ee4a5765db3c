"""Tests for the slackgate application (middleware wiring + routes).

Covers:
- Valid signature → 200 accepted
- Missing headers → 400
- GET on the webhook route → 405
- Wrong signature / tampered body → 401
- /health is reachable without Slack headers
- Settings drive the freshness window
"""

from __future__ import annotations

import json
import time

import pytest
from fastapi.testclient import TestClient

from slackgate.config import Settings
from slackgate.core.signature import generate_signature
from slackgate.main import create_app

# Test secret, used in all signature tests.
TEST_SECRET = "8f742231b10e8888abcd99yyyzzz85a5"

WEBHOOK_URL = "/api/webhooks/slack"


@pytest.fixture()
def settings() -> Settings:
    """Settings with the test signing secret, independent of any .env file."""
    return Settings(_env_file=None, slack_signing_secret=TEST_SECRET)


@pytest.fixture()
def client(settings: Settings) -> TestClient:
    """Create a FastAPI TestClient."""
    return TestClient(create_app(settings), raise_server_exceptions=False)


def _sign(body: bytes, timestamp: int | None = None, secret: str = TEST_SECRET) -> dict[str, str]:
    """Build valid Slack headers for a body."""
    ts = str(int(time.time()) if timestamp is None else timestamp)
    return {
        "X-Slack-Request-Timestamp": ts,
        "X-Slack-Signature": generate_signature("v0", ts, body, secret),
    }


def _event_payload(event_type: str = "app_mention") -> bytes:
    """Build a minimal Events API payload."""
    return json.dumps(
        {
            "token": "legacy",
            "team_id": "T061EG9R6",
            "type": "event_callback",
            "event": {"type": event_type, "user": "U061F7AUR", "text": "hello"},
        }
    ).encode()


# =============================================================================
#  Signature Tests
# =============================================================================


class TestSlackWebhook:
    def test_valid_signature_returns_200(self, client: TestClient) -> None:
        body = _event_payload()
        response = client.post(WEBHOOK_URL, content=body, headers=_sign(body))
        assert response.status_code == 200
        assert response.json()["status"] == "accepted"

    def test_form_encoded_body_accepted(self, client: TestClient) -> None:
        body = b"command=%2Fweather&text=94070&team_id=T0001"
        headers = _sign(body) | {"Content-Type": "application/x-www-form-urlencoded"}
        response = client.post(WEBHOOK_URL, content=body, headers=headers)
        assert response.status_code == 200

    def test_missing_signature_returns_400(self, client: TestClient) -> None:
        body = _event_payload()
        headers = _sign(body)
        del headers["X-Slack-Signature"]
        response = client.post(WEBHOOK_URL, content=body, headers=headers)
        assert response.status_code == 400
        assert "Missing" in response.json()["detail"]

    def test_get_returns_405(self, client: TestClient) -> None:
        response = client.get(WEBHOOK_URL, headers=_sign(b""))
        assert response.status_code == 405

    def test_wrong_signature_returns_401(self, client: TestClient) -> None:
        body = _event_payload()
        headers = _sign(body, secret="not-the-secret")
        response = client.post(WEBHOOK_URL, content=body, headers=headers)
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid Slack signature"

    def test_tampered_body_returns_401(self, client: TestClient) -> None:
        headers = _sign(_event_payload())
        response = client.post(WEBHOOK_URL, content=_event_payload("message"), headers=headers)
        assert response.status_code == 401

    def test_stale_request_returns_401(self, settings: Settings) -> None:
        settings.slack_max_request_age_seconds = 60
        client = TestClient(create_app(settings), raise_server_exceptions=False)
        body = _event_payload()
        response = client.post(WEBHOOK_URL, content=body, headers=_sign(body, int(time.time()) - 120))
        assert response.status_code == 401

    def test_missing_secret_returns_500(self) -> None:
        client = TestClient(
            create_app(Settings(_env_file=None, slack_signing_secret="")),
            raise_server_exceptions=False,
        )
        body = _event_payload()
        response = client.post(WEBHOOK_URL, content=body, headers=_sign(body))
        assert response.status_code == 500


class TestHealth:
    def test_health_is_public(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "signing_configured": True}

    def test_health_reports_missing_secret(self) -> None:
        client = TestClient(create_app(Settings(_env_file=None, slack_signing_secret="")))
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["signing_configured"] is False

    def test_health_does_not_expose_secret(self, client: TestClient) -> None:
        assert TEST_SECRET not in client.get("/health").text


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.slack_signature_version == "v0"
        assert settings.slack_max_request_age.total_seconds() == 300
        assert settings.slack_protected_paths == ("/api/webhooks/slack",)
        assert settings.slack_allowed_method == "POST"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SLACK_SIGNING_SECRET", "from-env")
        monkeypatch.setenv("SLACK_MAX_REQUEST_AGE_SECONDS", "60")
        settings = Settings(_env_file=None)
        assert settings.slack_signing_secret == "from-env"
        assert settings.slack_max_request_age.total_seconds() == 60
