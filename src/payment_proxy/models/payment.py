"""Transient payment models.

None of these are persisted; each lives for the duration of one inbound call
(or, for ``AuthToken``, until the optional token cache expires it).
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any


@dataclass(frozen=True)
class Credentials:
    """Airwallex API credentials."""

    client_id: str
    api_key: str = field(repr=False)

    @property
    def is_complete(self) -> bool:
        return bool(self.client_id) and bool(self.api_key)


@dataclass(frozen=True)
class AuthToken:
    """Bearer token returned by the Airwallex login endpoint."""

    value: str = field(repr=False)
    obtained_at: datetime
    expires_at: datetime | None = None

    def is_fresh(self, now: datetime, margin: timedelta) -> bool:
        """True while the token stays valid for at least ``margin`` past ``now``.

        A token with no known expiry is never considered fresh.
        """
        if self.expires_at is None:
            return False
        return now + margin < self.expires_at


@dataclass(frozen=True)
class PaymentIntentRequest:
    """Validated, normalized request to create a payment intent.

    ``amount_minor`` is already in minor units (cents).
    """

    amount_minor: int
    currency: str
    order_id: str
    request_id: str


@dataclass(frozen=True)
class PaymentIntentResult:
    """Subset of the Airwallex payment intent returned to the storefront."""

    id: str
    client_secret: str
    status: str | None
    amount: Any
    currency: str | None


@dataclass(frozen=True)
class ConfirmationResult:
    """Outcome of confirming a payment intent."""

    status: str | None
    raw_intent: dict[str, Any]


@dataclass(frozen=True)
class PaymentStatus:
    """Current state of a payment intent."""

    status: str | None
    amount: Any
    currency: str | None
    customer_id: str | None = None
    merchant_order_id: str | None = None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
