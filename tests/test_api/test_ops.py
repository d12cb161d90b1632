from __future__ import annotations

from collections.abc import Callable

from fastapi import FastAPI
from fastapi.testclient import TestClient

from vedabeam.ops.events import REDACTED


def test_ops_events_lists_signup_with_redacted_email(client: TestClient) -> None:
    signup = client.post(
        "/api/waitlist",
        json={"email": "console@example.com"},
        headers={"X-Request-Id": "ops-console-trace"},
    )
    assert signup.status_code == 200

    response = client.get(
        "/api/ops/events",
        params={"type": "waitlist.signup", "correlation_id": "ops-console-trace"},
    )
    assert response.status_code == 200
    [event] = response.json()
    assert event["event_type"] == "waitlist.signup"
    assert event["payload"]["email"] == REDACTED
    assert "console@example.com" not in response.text


def test_ops_events_limit_is_bounded(client: TestClient) -> None:
    response = client.get("/api/ops/events", params={"limit": 0})
    assert response.status_code == 422


def test_ops_events_hidden_in_production(make_app: Callable[..., FastAPI]) -> None:
    client = TestClient(make_app(environment="production"))
    response = client.get("/api/ops/events")
    assert response.status_code == 404
    assert response.json()["path"] == "/api/ops/events"


def test_ops_events_hidden_when_disabled(make_app: Callable[..., FastAPI]) -> None:
    client = TestClient(make_app(ops_console_enabled=False))
    assert client.get("/api/ops/events").status_code == 404
