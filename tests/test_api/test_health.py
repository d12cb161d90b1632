from __future__ import annotations

import re
from collections.abc import Callable

from fastapi import FastAPI
from fastapi.testclient import TestClient

from vedabeam.api.main import app


def test_health_ok(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "vedabeam-pitch-onepager"
    assert data["version"] == "1.0.0"
    assert data["environment"] == "development"
    assert data["port"] == 3000
    assert data["uptime"] >= 0
    assert data["timestamp"].endswith("Z")
    assert data["memory"]["peak_rss_bytes"] > 0


def test_health_reports_configured_port_and_environment(make_app: Callable[..., FastAPI]) -> None:
    client = TestClient(make_app(port=8080, environment="production"))
    data = client.get("/health").json()
    assert data["port"] == 8080
    assert data["environment"] == "production"


def test_health_request_id_generated(client: TestClient) -> None:
    response = client.get("/health")
    request_id = response.headers.get("x-request-id")
    assert request_id is not None
    assert re.fullmatch(r"[0-9a-f]{32}", request_id) is not None


def test_health_preserves_incoming_request_id(client: TestClient) -> None:
    response = client.get("/health", headers={"x-request-id": "trace-abc-123"})
    assert response.status_code == 200
    assert response.headers.get("x-request-id") == "trace-abc-123"


def test_api_status(client: TestClient) -> None:
    response = client.get("/api/status")
    assert response.status_code == 200
    data = response.json()
    assert data["api"] == "VedaBeam Pitch One-Pager API"
    assert data["version"] == "1.0.0"
    assert data["status"] == "operational"
    assert data["endpoints"]
    assert data["endpoints"]["waitlist"] == "POST /api/waitlist"
    assert response.headers.get("x-request-id")


def test_api_status_lists_ops_events_outside_production(make_app: Callable[..., FastAPI]) -> None:
    development = TestClient(make_app()).get("/api/status").json()
    production = TestClient(make_app(environment="production")).get("/api/status").json()
    assert development["endpoints"]["ops_events"] == "GET /api/ops/events"
    assert "ops_events" not in production["endpoints"]


def test_module_level_app_serves_health() -> None:
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
