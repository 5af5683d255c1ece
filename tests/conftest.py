"""Pytest configuration and shared fixtures for all tests.

This module provides shared test fixtures including:
- Settings factory with test credentials
- FakeAirwallex: an httpx MockTransport standing in for the Airwallex API
- Application and TestClient wired to the fake
"""

import json
from typing import Any, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from payment_proxy.api.main import create_app
from payment_proxy.clients.airwallex_client import (
    CONFIRM_INTENT_PATH,
    CREATE_INTENT_PATH,
    INTENT_PATH,
    LOGIN_PATH,
)
from payment_proxy.config import Settings

TEST_BASE_URL = "https://api-demo.airwallex.test"
TEST_ORIGIN = "http://localhost:5173"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeAirwallex:
    """Records requests and answers them from per-route canned responses."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Handler] = {}
        self.on("POST", LOGIN_PATH, json={"token": "tok_test", "expires_at": "2099-01-01T00:00:00+0000"})

    def on(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        raises: Exception | None = None,
    ) -> None:
        """Register the response for ``method path``."""

        def handler(request: httpx.Request) -> httpx.Response:
            if raises is not None:
                raise raises
            return httpx.Response(status, json=json)

        self._routes[(method, path)] = handler

    def on_create(self, **kwargs: Any) -> None:
        self.on("POST", CREATE_INTENT_PATH, **kwargs)

    def on_confirm(self, intent_id: str, **kwargs: Any) -> None:
        self.on("POST", CONFIRM_INTENT_PATH.format(intent_id=intent_id), **kwargs)

    def on_get(self, intent_id: str, **kwargs: Any) -> None:
        self.on("GET", INTENT_PATH.format(intent_id=intent_id), **kwargs)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self._routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"code": "not_found"})
        return handler(request)

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "airwallex_client_id": "client_test_id",
        "airwallex_api_key": "api_test_key",
        "airwallex_base_url": TEST_BASE_URL,
        "airwallex_timeout_seconds": 5.0,
        "airwallex_webhook_secret": None,
        "environment": "development",
        "log_level": "WARNING",
        "cors_allowed_origins": [TEST_ORIGIN],
        "token_cache_enabled": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    """Development settings with complete test credentials."""
    return make_settings()


@pytest.fixture
def production_settings() -> Settings:
    return make_settings(environment="production")


@pytest.fixture
def fake_airwallex() -> FakeAirwallex:
    return FakeAirwallex()


@pytest.fixture
def app(settings, fake_airwallex):
    return create_app(settings, transport=fake_airwallex.transport)


@pytest.fixture
def api_client(app):
    """TestClient with the lifespan running for the duration of the test."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def intent_response() -> dict[str, Any]:
    """A created payment intent as Airwallex returns it."""
    return {
        "id": "int_1",
        "client_secret": "sec_1",
        "status": "requires_payment_method",
        "amount": 2999,
        "currency": "USD",
        "merchant_order_id": "ORD-1",
        "request_id": "pi_test",
        "created_at": "2024-01-01T12:00:00+0000",
        "available_payment_method_types": ["card"],
    }
