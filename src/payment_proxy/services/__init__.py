"""Payment operations layered on the Airwallex client."""

from payment_proxy.services.payments import PaymentService
from payment_proxy.services.webhooks import WebhookVerifier

__all__ = ["PaymentService", "WebhookVerifier"]
