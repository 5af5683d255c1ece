"""Outbound clients for the Airwallex API."""

from payment_proxy.clients.airwallex_client import AirwallexClient
from payment_proxy.clients.token_provider import TokenProvider

__all__ = ["AirwallexClient", "TokenProvider"]
