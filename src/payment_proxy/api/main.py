"""FastAPI application entry point for the payment proxy."""

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncIterator

import httpx
import structlog
from fastapi import FastAPI

from payment_proxy import __version__
from payment_proxy.api.errors import register_exception_handlers
from payment_proxy.api.middleware import (
    register_cors,
    register_origin_guard,
    register_request_logging,
)
from payment_proxy.api.routes import health, payments, webhooks
from payment_proxy.clients.airwallex_client import AirwallexClient
from payment_proxy.clients.token_provider import TokenProvider
from payment_proxy.config import Settings, settings as default_settings
from payment_proxy.logging_config import configure_logging
from payment_proxy.services.payments import PaymentService
from payment_proxy.services.webhooks import WebhookVerifier

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager.

    Handles startup and shutdown:
    - Probe credentials (missing ones are reported, payment routes then fail
      with a configuration error)
    - Close the Airwallex HTTP client on shutdown
    """
    settings: Settings = app.state.settings
    logger.info(
        "starting_payment_proxy",
        environment=settings.environment,
        airwallex_base=settings.api_base_url,
    )

    missing = settings.missing_credentials()
    if missing:
        logger.error("missing_airwallex_credentials", missing=missing)
    else:
        logger.info("airwallex_credentials_configured")

    logger.info("payment_proxy_started")

    yield

    logger.info("shutting_down_payment_proxy")
    await app.state.airwallex_client.close()
    logger.info("payment_proxy_shutdown_complete")


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Configuration; defaults to the environment-loaded settings
        transport: Optional httpx transport for the Airwallex client (tests)
    """
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(
        title="Payment Proxy",
        description="Stateless proxy between a storefront and the Airwallex payment API",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
    )

    client = AirwallexClient(
        base_url=settings.api_base_url,
        timeout_seconds=settings.airwallex_timeout_seconds,
        transport=transport,
    )
    token_provider = TokenProvider(
        client=client,
        credentials=settings.credentials,
        cache_enabled=settings.token_cache_enabled,
        refresh_margin=timedelta(seconds=settings.token_refresh_margin_seconds),
        default_ttl=timedelta(seconds=settings.token_cache_default_ttl_seconds),
    )

    app.state.settings = settings
    app.state.airwallex_client = client
    app.state.payment_service = PaymentService(
        client=client,
        token_provider=token_provider,
        product_name=settings.product_name,
    )
    app.state.webhook_verifier = WebhookVerifier(
        secret=settings.airwallex_webhook_secret,
        tolerance_seconds=settings.webhook_tolerance_seconds,
    )

    register_exception_handlers(app)
    register_cors(app, settings)
    register_origin_guard(app, settings)
    register_request_logging(app)

    app.include_router(health.router)
    app.include_router(payments.router)
    app.include_router(webhooks.router)

    return app

