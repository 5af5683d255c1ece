"""Airwallex webhook receiver."""

import structlog
from fastapi import APIRouter, Header, Request

from payment_proxy.api.dependencies import Webhooks
from payment_proxy.api.models import WebhookAckJSON

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/webhooks/payment-events", response_model=WebhookAckJSON)
async def receive_payment_event(
    request: Request,
    verifier: Webhooks,
    x_timestamp: str | None = Header(default=None),
    x_signature: str | None = Header(default=None),
) -> WebhookAckJSON:
    """Accept a payment event delivery.

    The signature is checked against the raw body before it is parsed. Events
    are only logged; nothing is persisted.
    """
    body = await request.body()
    verifier.verify(body, x_timestamp, x_signature)
    event = verifier.parse_event(body)

    logger.info(
        "webhook_event_received",
        event_id=event.get("id"),
        event_name=event.get("name"),
        verified=verifier.enabled,
    )
    return WebhookAckJSON(received=True)
