"""Airwallex webhook signature verification.

Airwallex signs each delivery with HMAC-SHA256 over ``x-timestamp`` followed
by the raw request body, hex encoded in ``x-signature``.
"""

import hashlib
import hmac
import json
import math
import time
from typing import Any

import structlog

from payment_proxy.models.exceptions import PaymentError, ValidationError

logger = structlog.get_logger(__name__)


class WebhookSignatureError(PaymentError):
    """Webhook signature is missing, wrong or too old."""

    status_code = 401
    default_message = "Invalid webhook signature"


def compute_signature(secret: str, timestamp: str, body: bytes) -> str:
    """Hex HMAC-SHA256 of ``timestamp + body`` keyed with the webhook secret."""
    return hmac.new(
        secret.encode("utf-8"),
        timestamp.encode("utf-8") + body,
        hashlib.sha256,
    ).hexdigest()


class WebhookVerifier:
    """Verifies and parses webhook deliveries.

    Without a secret every delivery is accepted unverified, which is only
    suitable for development.
    """

    def __init__(self, secret: str | None, tolerance_seconds: int = 300) -> None:
        self.secret = secret
        self.tolerance_seconds = tolerance_seconds

    @property
    def enabled(self) -> bool:
        return bool(self.secret)

    def verify(
        self,
        body: bytes,
        timestamp: str | None,
        signature: str | None,
        now: float | None = None,
    ) -> None:
        """
        Check a delivery's signature.

        Raises:
            WebhookSignatureError: Missing headers, stale timestamp or mismatch
        """
        if not self.enabled:
            logger.warning("webhook_signature_not_verified")
            return

        if not timestamp or not signature:
            logger.warning("webhook_signature_headers_missing")
            raise WebhookSignatureError()

        if self.tolerance_seconds > 0:
            sent_at = _timestamp_seconds(timestamp)
            current = time.time() if now is None else now
            if sent_at is None or abs(current - sent_at) > self.tolerance_seconds:
                logger.warning("webhook_timestamp_outside_tolerance", timestamp=timestamp)
                raise WebhookSignatureError()

        expected = compute_signature(self.secret, timestamp, body)
        if not hmac.compare_digest(expected, signature.strip().lower()):
            logger.warning("webhook_signature_mismatch")
            raise WebhookSignatureError()

    def parse_event(self, body: bytes) -> dict[str, Any]:
        """Decode a delivery body into an event envelope."""
        try:
            event = json.loads(body)
        except ValueError as e:
            raise ValidationError(message="Invalid webhook payload") from e
        if not isinstance(event, dict):
            raise ValidationError(message="Invalid webhook payload")
        return event


def _timestamp_seconds(timestamp: str) -> float | None:
    """Epoch seconds from a header that may be in seconds or milliseconds."""
    try:
        value = float(timestamp)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    # Millisecond timestamps are 13 digits until the year 2286
    if value > 1e11:
        value /= 1000
    return value
