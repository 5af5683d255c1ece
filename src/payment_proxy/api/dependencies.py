"""FastAPI dependencies.

Settings and services are built once in ``create_app`` and stored on
``app.state``; routes receive them through these dependencies.
"""

from typing import Annotated

from fastapi import Depends, Request

from payment_proxy.config import Settings
from payment_proxy.services.payments import PaymentService
from payment_proxy.services.webhooks import WebhookVerifier


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


AppSettings = Annotated[Settings, Depends(get_settings)]


def get_payment_service(request: Request) -> PaymentService:
    return request.app.state.payment_service


Payments = Annotated[PaymentService, Depends(get_payment_service)]


def get_webhook_verifier(request: Request) -> WebhookVerifier:
    return request.app.state.webhook_verifier


Webhooks = Annotated[WebhookVerifier, Depends(get_webhook_verifier)]
