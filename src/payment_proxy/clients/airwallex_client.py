"""HTTP client for the Airwallex payment API."""

import base64
import uuid
from typing import Any

import httpx
import structlog

from payment_proxy.models.exceptions import (
    ProtocolError,
    ProviderHTTPError,
    ProviderTimeoutError,
    ServiceUnavailableError,
)
from payment_proxy.models.payment import Credentials

logger = structlog.get_logger(__name__)

LOGIN_PATH = "/api/v1/authentication/login"
CREATE_INTENT_PATH = "/api/v1/pa/payment_intents/create"
INTENT_PATH = "/api/v1/pa/payment_intents/{intent_id}"
CONFIRM_INTENT_PATH = "/api/v1/pa/payment_intents/{intent_id}/confirm"


class AirwallexClient:
    """
    Thin async wrapper around the four Airwallex endpoints this service uses.

    The client knows nothing about which failures matter to which operation.
    It raises:

    - ``ProviderTimeoutError`` when the call exceeds the configured timeout
    - ``ServiceUnavailableError`` for connection and other transport errors
    - ``ProviderHTTPError`` for every non-2xx response, carrying the parsed body
    - ``ProtocolError`` when a 2xx body is not a JSON object

    Callers map ``ProviderHTTPError`` to the user-facing error taxonomy.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the Airwallex client.

        Args:
            base_url: Airwallex API base URL (e.g., "https://api-demo.airwallex.com")
            timeout_seconds: Timeout applied to every request
            transport: Optional httpx transport, used to substitute a fake API in tests
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout_seconds,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

        logger.info(
            "airwallex_client_initialized",
            base_url=self.base_url,
            timeout_seconds=timeout_seconds,
        )

    async def close(self) -> None:
        """Close the HTTP client connection pool."""
        await self.http_client.aclose()

    async def login(self, credentials: Credentials) -> dict[str, Any]:
        """
        Exchange credentials for a bearer token.

        Credentials are sent as HTTP Basic auth, ``base64(client_id:api_key)``.
        This is the only encoding this client supports.

        Returns:
            Parsed login response (expected keys: ``token``, ``expires_at``)
        """
        encoded = base64.b64encode(
            f"{credentials.client_id}:{credentials.api_key}".encode()
        ).decode()
        return await self._request(
            "POST",
            LOGIN_PATH,
            operation="login",
            headers={"Authorization": f"Basic {encoded}"},
            json={},
        )

    async def create_payment_intent(
        self, token: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """Create a payment intent. ``payload`` amounts are in minor units."""
        return await self._request(
            "POST",
            CREATE_INTENT_PATH,
            operation="create_payment_intent",
            headers=_bearer(token),
            json=payload,
        )

    async def confirm_payment_intent(
        self, token: str, intent_id: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """Confirm an existing payment intent with a payment method."""
        return await self._request(
            "POST",
            CONFIRM_INTENT_PATH.format(intent_id=intent_id),
            operation="confirm_payment_intent",
            headers=_bearer(token),
            json=payload,
        )

    async def get_payment_intent(self, token: str, intent_id: str) -> dict[str, Any]:
        """Retrieve a payment intent."""
        return await self._request(
            "GET",
            INTENT_PATH.format(intent_id=intent_id),
            operation="get_payment_intent",
            headers=_bearer(token),
        )

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        headers: dict[str, str],
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        correlation_id = str(uuid.uuid4())
        log = logger.bind(
            operation=operation,
            correlation_id=correlation_id,
            path=path,
        )

        try:
            response = await self.http_client.request(
                method,
                path,
                headers={**headers, "X-Request-ID": correlation_id},
                json=json,
            )
        except httpx.TimeoutException as e:
            log.error("airwallex_request_timeout", error=str(e))
            raise ProviderTimeoutError(details="Request timeout with payment provider") from e
        except httpx.RequestError as e:
            # Network errors, connection errors, etc.
            log.error("airwallex_request_error", error=str(e))
            raise ServiceUnavailableError(details=f"Payment provider request error: {e}") from e

        body = _parse_body(response)

        if response.is_error:
            log.warning(
                "airwallex_error_response",
                status_code=response.status_code,
                body=body,
            )
            raise ProviderHTTPError(response.status_code, body)

        if not isinstance(body, dict):
            log.error(
                "airwallex_malformed_response",
                status_code=response.status_code,
            )
            raise ProtocolError(details="Payment provider returned a non-object body")

        log.debug("airwallex_request_success", status_code=response.status_code)
        return body

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _parse_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None
