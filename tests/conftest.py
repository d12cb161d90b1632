from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from vedabeam.api.main import create_app
from vedabeam.config import Settings


@pytest.fixture(autouse=True)
def _default_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("ENVIRONMENT", "NODE_ENV", "PORT", "CORS_ALLOW_ORIGINS", "OPS_CONSOLE_ENABLED"):
        monkeypatch.delenv(key, raising=False)
    from vedabeam.config import get_settings

    get_settings.cache_clear()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def _make(**overrides: Any) -> Settings:
        return Settings(_env_file=None, **overrides)

    return _make


@pytest.fixture
def make_app(make_settings: Callable[..., Settings]) -> Callable[..., FastAPI]:
    def _make(**overrides: Any) -> FastAPI:
        return create_app(make_settings(**overrides))

    return _make


@pytest.fixture
def client(make_app: Callable[..., FastAPI]) -> TestClient:
    return TestClient(make_app())
