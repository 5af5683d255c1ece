"""Operator check that the configured Airwallex credentials work.

Logs in once against the configured environment and reports the outcome
without printing the credentials or the token.
"""

import httpx

from payment_proxy.clients.airwallex_client import AirwallexClient
from payment_proxy.clients.token_provider import TokenProvider
from payment_proxy.config import Settings
from payment_proxy.models.exceptions import (
    AuthenticationError,
    ConfigurationError,
    PaymentError,
    ServiceUnavailableError,
)


async def validate_environment(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Run the credential check. Returns a process exit code."""
    print("\n" + "=" * 60)
    print("Airwallex Environment Validation")
    print("=" * 60)
    print(f"  Environment: {settings.environment}")
    print(f"  Airwallex API: {settings.api_base_url}")

    print("\n[1/2] Checking configuration...")
    missing = settings.missing_credentials()
    if missing:
        print(f"  ✗ Missing environment variables: {', '.join(missing)}")
        return 1
    print("  ✓ Credentials are configured")

    print("\n[2/2] Logging in to Airwallex...")
    async with AirwallexClient(
        base_url=settings.api_base_url,
        timeout_seconds=settings.airwallex_timeout_seconds,
        transport=transport,
    ) as client:
        provider = TokenProvider(client=client, credentials=settings.credentials)
        try:
            token = await provider.obtain_token()
        except ConfigurationError as e:
            print(f"  ✗ {e.message}")
            return 1
        except AuthenticationError:
            print("  ✗ Airwallex rejected the credentials. Check AIRWALLEX_CLIENT_ID and AIRWALLEX_API_KEY.")
            return 1
        except ServiceUnavailableError as e:
            print(f"  ✗ Airwallex unreachable: {e.message}")
            return 1
        except PaymentError as e:
            print(f"  ✗ Login failed: {e.message}")
            return 1

    expires = token.expires_at.isoformat() if token.expires_at else "unknown"
    print(f"  ✓ Token obtained (expires: {expires})")
    print("\n" + "=" * 60)
    print("✅ SUCCESS - Airwallex credentials are valid")
    print("=" * 60)
    return 0
