"""Translation of exceptions into the outward error shape.

Every error response is ``{"success": false, "error": <message>}``. Outside
production a ``details`` key carries provider diagnostics; in production raw
provider payloads never leave the service.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from payment_proxy.config import Settings
from payment_proxy.models.exceptions import PaymentError

logger = structlog.get_logger(__name__)


def error_body(message: str, details: Any, settings: Settings) -> dict[str, Any]:
    """Build the outward error shape, dropping details in production."""
    body: dict[str, Any] = {"success": False, "error": message}
    if details is not None and not settings.is_production:
        body["details"] = details
    return body


def error_response(error: PaymentError, settings: Settings) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=error_body(error.message, error.details, settings),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the boundary handlers that convert exceptions to responses."""

    @app.exception_handler(PaymentError)
    async def payment_error_handler(request: Request, exc: PaymentError) -> JSONResponse:
        logger.warning(
            "payment_request_failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            status_code=exc.status_code,
            error=exc.message,
        )
        return error_response(exc, request.app.state.settings)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(
            "invalid_request_body",
            path=request.url.path,
            errors=exc.errors(),
        )
        return JSONResponse(
            status_code=400,
            content=error_body(
                "Invalid request body",
                _jsonable_errors(exc),
                request.app.state.settings,
            ),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", path=request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_body(
                "Internal server error",
                str(exc),
                request.app.state.settings,
            ),
        )


def _jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    # ctx may hold exception instances that JSONResponse cannot encode
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
