"""Domain models for the payment proxy."""

from payment_proxy.models.exceptions import (
    AuthenticationError,
    ConfigurationError,
    NotFoundError,
    PaymentDeclinedError,
    PaymentError,
    ProtocolError,
    ProviderHTTPError,
    ProviderTimeoutError,
    ServiceUnavailableError,
    StatusUnavailableError,
    ValidationError,
)
from payment_proxy.models.payment import (
    AuthToken,
    ConfirmationResult,
    Credentials,
    PaymentIntentRequest,
    PaymentIntentResult,
    PaymentStatus,
)

__all__ = [
    "AuthToken",
    "AuthenticationError",
    "ConfigurationError",
    "ConfirmationResult",
    "Credentials",
    "NotFoundError",
    "PaymentDeclinedError",
    "PaymentError",
    "PaymentIntentRequest",
    "PaymentIntentResult",
    "PaymentStatus",
    "ProtocolError",
    "ProviderHTTPError",
    "ProviderTimeoutError",
    "ServiceUnavailableError",
    "StatusUnavailableError",
    "ValidationError",
]
