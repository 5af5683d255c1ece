"""Unit tests for the Airwallex HTTP client."""

import base64
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from payment_proxy.clients.airwallex_client import (
    CREATE_INTENT_PATH,
    LOGIN_PATH,
    AirwallexClient,
)
from payment_proxy.models.exceptions import (
    ProtocolError,
    ProviderHTTPError,
    ProviderTimeoutError,
    ServiceUnavailableError,
)
from payment_proxy.models.payment import Credentials


@pytest.fixture
def client():
    """Create an Airwallex client for testing."""
    return AirwallexClient(
        base_url="https://api-demo.airwallex.com/",
        timeout_seconds=5.0,
    )


@pytest.fixture
def credentials():
    return Credentials(client_id="client_abc", api_key="key_xyz")


class TestAirwallexClient:
    """Test suite for the Airwallex client."""

    def test_base_url_normalization(self, client):
        assert client.base_url == "https://api-demo.airwallex.com"
        assert client.timeout_seconds == 5.0

    @pytest.mark.asyncio
    async def test_login_sends_basic_auth(self, client, credentials):
        mock_request = AsyncMock(
            return_value=httpx.Response(200, json={"token": "tok_1"})
        )

        with patch.object(client.http_client, "request", mock_request):
            body = await client.login(credentials)

        assert body == {"token": "tok_1"}
        mock_request.assert_called_once()
        call_args = mock_request.call_args

        assert call_args[0] == ("POST", LOGIN_PATH)
        expected = base64.b64encode(b"client_abc:key_xyz").decode()
        assert call_args[1]["headers"]["Authorization"] == f"Basic {expected}"
        assert "X-Request-ID" in call_args[1]["headers"]
        assert call_args[1]["json"] == {}

    @pytest.mark.asyncio
    async def test_create_payment_intent_sends_bearer_token(self, client):
        mock_request = AsyncMock(
            return_value=httpx.Response(201, json={"id": "int_1"})
        )
        payload = {"request_id": "pi_1", "amount": 2999}

        with patch.object(client.http_client, "request", mock_request):
            body = await client.create_payment_intent("tok_1", payload)

        assert body == {"id": "int_1"}
        call_args = mock_request.call_args
        assert call_args[0] == ("POST", CREATE_INTENT_PATH)
        assert call_args[1]["headers"]["Authorization"] == "Bearer tok_1"
        assert call_args[1]["json"] == payload

    @pytest.mark.asyncio
    async def test_confirm_and_get_use_intent_paths(self, client):
        mock_request = AsyncMock(
            return_value=httpx.Response(200, json={"id": "int_9"})
        )

        with patch.object(client.http_client, "request", mock_request):
            await client.confirm_payment_intent("tok", "int_9", {"payment_method_id": "pm_1"})
            await client.get_payment_intent("tok", "int_9")

        first, second = mock_request.call_args_list
        assert first[0] == ("POST", "/api/v1/pa/payment_intents/int_9/confirm")
        assert second[0] == ("GET", "/api/v1/pa/payment_intents/int_9")
        assert second[1]["json"] is None

    @pytest.mark.asyncio
    async def test_error_status_raises_provider_http_error(self, client):
        mock_request = AsyncMock(
            return_value=httpx.Response(400, json={"code": "validation_error"})
        )

        with patch.object(client.http_client, "request", mock_request):
            with pytest.raises(ProviderHTTPError) as exc_info:
                await client.get_payment_intent("tok", "int_1")

        assert exc_info.value.status_code == 400
        assert exc_info.value.body == {"code": "validation_error"}

    @pytest.mark.asyncio
    async def test_error_with_text_body(self, client):
        mock_request = AsyncMock(
            return_value=httpx.Response(502, text="Bad Gateway")
        )

        with patch.object(client.http_client, "request", mock_request):
            with pytest.raises(ProviderHTTPError) as exc_info:
                await client.get_payment_intent("tok", "int_1")

        assert exc_info.value.status_code == 502
        assert exc_info.value.body == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_timeout_raises_provider_timeout(self, client):
        with patch.object(
            client.http_client,
            "request",
            AsyncMock(side_effect=httpx.ReadTimeout("timed out")),
        ):
            with pytest.raises(ProviderTimeoutError) as exc_info:
                await client.get_payment_intent("tok", "int_1")

        assert exc_info.value.status_code == 504

    @pytest.mark.asyncio
    async def test_connection_error_raises_service_unavailable(self, client):
        with patch.object(
            client.http_client,
            "request",
            AsyncMock(side_effect=httpx.ConnectError("connection refused")),
        ):
            with pytest.raises(ServiceUnavailableError) as exc_info:
                await client.get_payment_intent("tok", "int_1")

        assert not isinstance(exc_info.value, ProviderTimeoutError)
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_non_object_success_body_is_protocol_error(self, client):
        mock_request = AsyncMock(return_value=httpx.Response(200, json=["unexpected"]))

        with patch.object(client.http_client, "request", mock_request):
            with pytest.raises(ProtocolError):
                await client.get_payment_intent("tok", "int_1")

    @pytest.mark.asyncio
    async def test_client_cleanup(self):
        """Test that client properly cleans up resources."""
        async with AirwallexClient(base_url="http://localhost:9000") as client:
            assert client.http_client is not None

        assert client.http_client.is_closed
