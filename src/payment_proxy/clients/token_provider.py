"""Bearer token acquisition for the Airwallex API."""

import asyncio
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any

import structlog

from payment_proxy.clients.airwallex_client import AirwallexClient
from payment_proxy.models.exceptions import (
    AuthenticationError,
    ConfigurationError,
    PaymentError,
    ProtocolError,
    ProviderHTTPError,
    ServiceUnavailableError,
)
from payment_proxy.models.payment import AuthToken, Credentials, utcnow

logger = structlog.get_logger(__name__)


class TokenProvider:
    """
    Exchanges configured credentials for a short-lived Airwallex bearer token.

    By default every call logs in again, so each payment operation pays one
    extra round trip and shares nothing with concurrent requests. With
    ``cache_enabled`` the token is reused until ``refresh_margin`` before it
    expires; concurrent callers wait on a single login instead of each
    starting their own. ``invalidate`` drops a token that Airwallex has
    rejected downstream.
    """

    def __init__(
        self,
        client: AirwallexClient,
        credentials: Credentials,
        cache_enabled: bool = False,
        refresh_margin: timedelta = timedelta(seconds=60),
        default_ttl: timedelta = timedelta(seconds=1500),
    ) -> None:
        self.client = client
        self.credentials = credentials
        self.cache_enabled = cache_enabled
        self.refresh_margin = refresh_margin
        self.default_ttl = default_ttl

        self._cached: AuthToken | None = None
        self._lock = asyncio.Lock()

    async def obtain_token(self) -> AuthToken:
        """
        Return a bearer token usable for at least ``refresh_margin``.

        Raises:
            ConfigurationError: Credentials are not configured (no call is made)
            AuthenticationError: Airwallex rejected the credentials
            ServiceUnavailableError: Airwallex 5xx, timeout or network failure
            ProtocolError: Login succeeded but the response has no token
            PaymentError: Any other login failure
        """
        if not self.credentials.is_complete:
            logger.error("airwallex_credentials_missing")
            raise ConfigurationError(details="Missing Airwallex client ID or API key")

        if not self.cache_enabled:
            return await self._login()

        cached = self._usable_cached_token()
        if cached is not None:
            return cached

        async with self._lock:
            # Another caller may have refreshed while we waited
            cached = self._usable_cached_token()
            if cached is not None:
                return cached

            token = await self._login()
            if token.expires_at is None:
                token = replace(token, expires_at=token.obtained_at + self.default_ttl)
            self._cached = token
            logger.info("airwallex_token_cached", cached_until=token.expires_at.isoformat())
            return token

    def invalidate(self, token: AuthToken | None = None) -> None:
        """Forget the cached token.

        When ``token`` is given, only drop the cache if it still holds that
        token, so a stale rejection cannot evict a freshly refreshed one.
        """
        if self._cached is None:
            return
        if token is not None and token.value != self._cached.value:
            return
        logger.info("airwallex_token_invalidated")
        self._cached = None

    def _usable_cached_token(self) -> AuthToken | None:
        if self._cached is None or not self._cached.is_fresh(utcnow(), self.refresh_margin):
            return None
        return self._cached

    async def _login(self) -> AuthToken:
        try:
            body = await self.client.login(self.credentials)
        except ProviderHTTPError as e:
            raise _map_login_error(e) from e
        except ProtocolError as e:
            raise ProtocolError("Missing token in response", details=e.details) from e

        token_value = body.get("token")
        if not isinstance(token_value, str) or not token_value:
            logger.error("airwallex_login_missing_token", keys=sorted(body.keys()))
            raise ProtocolError("Missing token in response")

        token = AuthToken(
            value=token_value,
            obtained_at=utcnow(),
            expires_at=parse_expires_at(body.get("expires_at")),
        )
        logger.info(
            "airwallex_login_success",
            expires_at=token.expires_at.isoformat() if token.expires_at else None,
        )
        return token


def _map_login_error(error: ProviderHTTPError) -> PaymentError:
    logger.error(
        "airwallex_login_failed",
        status_code=error.status_code,
        body=error.body,
    )
    if error.status_code in (401, 403):
        return AuthenticationError(details=error.body)
    if error.status_code >= 500:
        return ServiceUnavailableError(details=error.body)
    return PaymentError("Failed to authenticate with payment provider", details=error.body)


def parse_expires_at(value: Any) -> datetime | None:
    """Parse Airwallex's ``expires_at`` (e.g. ``2021-06-24T06:29:33+0000``).

    Returns None for absent, unparseable or naive timestamps.
    """
    if not isinstance(value, str) or not value:
        return None

    parsed = None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        for fmt in ("%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%dT%H:%M:%S.%f%z"):
            try:
                parsed = datetime.strptime(value, fmt)
                break
            except ValueError:
                continue

    if parsed is None or parsed.tzinfo is None:
        logger.warning("airwallex_unparseable_expires_at", value=value)
        return None
    return parsed
