"""Payment intent operations: create, confirm and status lookup.

Each operation validates caller input before any outbound call, obtains a
bearer token, forwards one request to Airwallex and translates the outcome.
The translation differs per operation, so it lives here rather than in the
client.
"""

import re
from typing import Any

import structlog

from payment_proxy.clients.airwallex_client import AirwallexClient
from payment_proxy.clients.token_provider import TokenProvider
from payment_proxy.domain.amounts import (
    generate_request_id,
    normalize_currency,
    to_minor_units,
)
from payment_proxy.models.exceptions import (
    AuthenticationError,
    ConfigurationError,
    NotFoundError,
    PaymentDeclinedError,
    PaymentError,
    ProtocolError,
    ProviderHTTPError,
    ServiceUnavailableError,
    StatusUnavailableError,
    ValidationError,
)
from payment_proxy.models.payment import (
    AuthToken,
    ConfirmationResult,
    PaymentIntentRequest,
    PaymentIntentResult,
    PaymentStatus,
)

logger = structlog.get_logger(__name__)

_INTENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")


class PaymentService:
    """Creates, confirms and reads Airwallex payment intents."""

    def __init__(
        self,
        client: AirwallexClient,
        token_provider: TokenProvider,
        product_name: str = "Vehicle History Report",
    ) -> None:
        self.client = client
        self.token_provider = token_provider
        self.product_name = product_name

    def build_intent_request(
        self, raw_amount: Any, currency: str | None, order_id: Any
    ) -> PaymentIntentRequest:
        """Validate caller input and normalize it for Airwallex.

        Raises:
            ValidationError: For a bad amount, order id or currency
        """
        amount_minor = to_minor_units(raw_amount)

        if order_id is None or (isinstance(order_id, str) and not order_id.strip()):
            raise ValidationError(field="orderId", message="orderId is required")
        # bool is an int subclass
        if isinstance(order_id, bool) or not isinstance(order_id, (str, int)):
            raise ValidationError(
                field="orderId", message="orderId must be a string or integer"
            )

        return PaymentIntentRequest(
            amount_minor=amount_minor,
            currency=normalize_currency(currency),
            order_id=str(order_id).strip(),
            request_id=generate_request_id("pi"),
        )

    def build_intent_payload(self, request: PaymentIntentRequest) -> dict[str, Any]:
        """Airwallex create-intent body. All amounts are minor units."""
        return {
            "request_id": request.request_id,
            "amount": request.amount_minor,
            "currency": request.currency,
            "merchant_order_id": request.order_id,
            "order": {
                "products": [
                    {
                        "name": self.product_name,
                        "quantity": 1,
                        "unit_price": request.amount_minor,
                    }
                ]
            },
        }

    async def create_intent(
        self, raw_amount: Any, currency: str | None, order_id: Any
    ) -> PaymentIntentResult:
        """
        Create a payment intent for an order.

        Args:
            raw_amount: Charge amount in major units (e.g. 29.99)
            currency: ISO 4217 code, defaults to USD
            order_id: Merchant order identifier

        Returns:
            PaymentIntentResult projected from the Airwallex response

        Raises:
            ValidationError: Invalid input (no outbound call) or Airwallex 400
            ConfigurationError: Credentials missing
            AuthenticationError: Airwallex 401
            ServiceUnavailableError: Airwallex 5xx, network failure or timeout
            ProtocolError: Airwallex response without id or client secret
            PaymentError: Any other failure
        """
        request = self.build_intent_request(raw_amount, currency, order_id)
        payload = self.build_intent_payload(request)

        logger.info(
            "creating_payment_intent",
            request_id=request.request_id,
            order_id=request.order_id,
            amount=request.amount_minor,
            currency=request.currency,
        )

        token = await self.token_provider.obtain_token()
        try:
            body = await self.client.create_payment_intent(token.value, payload)
        except ProviderHTTPError as e:
            raise self._map_create_error(e, token) from e

        intent_id = body.get("id")
        client_secret = body.get("client_secret")
        if not intent_id or not client_secret:
            logger.error(
                "payment_intent_response_incomplete",
                request_id=request.request_id,
                keys=sorted(body.keys()),
            )
            raise ProtocolError(details="Payment intent response missing id or client_secret")

        logger.info(
            "payment_intent_created",
            request_id=request.request_id,
            payment_intent_id=intent_id,
            status=body.get("status"),
        )

        return PaymentIntentResult(
            id=intent_id,
            client_secret=client_secret,
            status=body.get("status"),
            amount=body.get("amount"),
            currency=body.get("currency"),
        )

    async def confirm(self, intent_id: Any, payment_method_id: Any) -> ConfirmationResult:
        """
        Confirm a payment intent with a payment method.

        Raises:
            ValidationError: Missing identifiers (no outbound call)
            NotFoundError: Airwallex 404
            PaymentDeclinedError: Airwallex 402
            AuthenticationError: Airwallex 401
            ServiceUnavailableError: Network failure or timeout
            PaymentError: Any other failure
        """
        intent_id = _require_intent_id(intent_id)
        payment_method_id = _require_id(payment_method_id, "paymentMethodId")

        request_id = generate_request_id("pc")
        logger.info(
            "confirming_payment_intent",
            payment_intent_id=intent_id,
            request_id=request_id,
        )

        token = await self.token_provider.obtain_token()
        try:
            body = await self.client.confirm_payment_intent(
                token.value,
                intent_id,
                {"request_id": request_id, "payment_method_id": payment_method_id},
            )
        except ProviderHTTPError as e:
            raise self._map_confirm_error(e, token) from e

        logger.info(
            "payment_intent_confirmed",
            payment_intent_id=intent_id,
            status=body.get("status"),
        )
        return ConfirmationResult(status=body.get("status"), raw_intent=body)

    async def get_status(self, intent_id: Any) -> PaymentStatus:
        """
        Read the current status of a payment intent.

        Status checks are non-critical reads: every provider-side failure is
        reported as ``StatusUnavailableError`` without further detail.

        Raises:
            ValidationError: Missing intent id (no outbound call)
            ConfigurationError: Credentials missing
            StatusUnavailableError: Any Airwallex failure
        """
        intent_id = _require_intent_id(intent_id)

        token = None
        try:
            token = await self.token_provider.obtain_token()
            body = await self.client.get_payment_intent(token.value, intent_id)
        except ConfigurationError:
            raise
        except ProviderHTTPError as e:
            if e.status_code == 401 and token is not None:
                self.token_provider.invalidate(token)
            logger.warning(
                "payment_status_failed",
                payment_intent_id=intent_id,
                status_code=e.status_code,
            )
            raise StatusUnavailableError(details=e.body) from e
        except PaymentError as e:
            logger.warning(
                "payment_status_failed",
                payment_intent_id=intent_id,
                error=type(e).__name__,
            )
            raise StatusUnavailableError(details=e.details) from e

        return PaymentStatus(
            status=body.get("status"),
            amount=body.get("amount"),
            currency=body.get("currency"),
            customer_id=body.get("customer_id"),
            merchant_order_id=body.get("merchant_order_id"),
        )

    def _map_create_error(self, error: ProviderHTTPError, token: AuthToken) -> PaymentError:
        logger.error(
            "payment_intent_creation_failed",
            status_code=error.status_code,
            body=error.body,
        )
        if error.status_code == 401:
            self.token_provider.invalidate(token)
            return AuthenticationError(details=error.body)
        if error.status_code == 400:
            return ValidationError(message="Invalid payment request", details=error.body)
        if error.status_code >= 500:
            return ServiceUnavailableError(details=error.body)
        return PaymentError("Failed to create payment intent", details=error.body)

    def _map_confirm_error(self, error: ProviderHTTPError, token: AuthToken) -> PaymentError:
        logger.error(
            "payment_confirmation_failed",
            status_code=error.status_code,
            body=error.body,
        )
        if error.status_code == 404:
            return NotFoundError(details=error.body)
        if error.status_code == 402:
            return PaymentDeclinedError(details=error.body)
        if error.status_code == 401:
            self.token_provider.invalidate(token)
            return AuthenticationError(details=error.body)
        return PaymentError("Failed to confirm payment", details=error.body)


def _require_id(value: Any, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(field=field, message=f"{field} is required")
    return str(value).strip()


def _require_intent_id(value: Any) -> str:
    # Interpolated into the request path
    intent_id = _require_id(value, "paymentIntentId")
    if not _INTENT_ID_PATTERN.match(intent_id):
        raise ValidationError(field="paymentIntentId", message="paymentIntentId is invalid")
    return intent_id
