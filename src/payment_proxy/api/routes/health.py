"""Service information and liveness endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter

from payment_proxy import __version__
from payment_proxy.api.dependencies import AppSettings
from payment_proxy.api.models import HealthResponseJSON

router = APIRouter()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/")
async def root(settings: AppSettings) -> dict:
    """Root endpoint."""
    return {
        "ok": True,
        "service": settings.service_name,
        "version": __version__,
        "env": settings.environment,
        "airwallexBase": settings.api_base_url,
        "time": _now_iso(),
    }


@router.get("/health", response_model=HealthResponseJSON)
async def health_check(settings: AppSettings) -> HealthResponseJSON:
    """Liveness probe. Does not contact Airwallex."""
    return HealthResponseJSON(
        status="OK",
        service=settings.service_name,
        timestamp=_now_iso(),
    )
