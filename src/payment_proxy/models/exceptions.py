"""Error taxonomy for the payment proxy.

Every error a caller can see is a ``PaymentError``. Each subclass carries the
HTTP status and the user-safe message the API returns for it; ``details``
holds provider diagnostics and is only exposed outside production.
"""

from typing import Any


class PaymentError(Exception):
    """Base exception for payment failures. Maps to HTTP 500."""

    status_code = 500
    default_message = "Payment request failed"

    def __init__(self, message: str | None = None, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(PaymentError):
    """Caller input is malformed. Maps to HTTP 400."""

    status_code = 400
    default_message = "Invalid payment request"

    def __init__(
        self,
        field: str | None = None,
        message: str | None = None,
        details: Any = None,
    ) -> None:
        self.field = field
        super().__init__(message, details)


class ConfigurationError(PaymentError):
    """Credentials are missing or invalid in local configuration.

    Operators should be alerted; no request can succeed until it is fixed.
    """

    default_message = "Payment service is not configured"


class AuthenticationError(PaymentError):
    """Airwallex rejected our credentials or an expired bearer token."""

    default_message = "Authentication failed with payment provider"


class ServiceUnavailableError(PaymentError):
    """
    Airwallex is unreachable or overloaded.

    This is a RETRYABLE error from the caller's point of view. The proxy
    itself never retries.
    """

    status_code = 503
    default_message = "Payment service temporarily unavailable. Please try again later."


class ProviderTimeoutError(ServiceUnavailableError):
    """An outbound call exceeded the configured timeout."""

    status_code = 504
    default_message = "Payment provider timeout. Please try again."


class NotFoundError(PaymentError):
    """Airwallex does not know the payment intent."""

    status_code = 404
    default_message = "Payment intent not found"


class PaymentDeclinedError(PaymentError):
    """The payment method was declined."""

    status_code = 402
    default_message = "Payment declined. Please check your payment details."


class ProtocolError(PaymentError):
    """Airwallex answered successfully but the body is unusable."""

    status_code = 502
    default_message = "Invalid response from payment provider"


class StatusUnavailableError(PaymentError):
    """Any failure while reading payment status. Details are suppressed."""

    default_message = "Failed to get payment status"


class ProviderHTTPError(Exception):
    """
    Raised by the Airwallex client for any non-2xx response.

    Internal to the client and service layers: services translate it into a
    ``PaymentError`` subclass according to the operation being performed.
    """

    def __init__(self, status_code: int, body: Any = None) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Airwallex returned HTTP {status_code}")
