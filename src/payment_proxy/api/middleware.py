"""Cross-cutting HTTP middleware.

- register_cors: credentialed CORS for the configured allow-list only
- register_origin_guard: rejects requests whose Origin is not allowed
- register_request_logging: correlation id, access log and security headers

Starlette runs the most recently added middleware first, so ``create_app``
registers them in the order above to get logging outermost.
"""

import time
import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payment_proxy.api.errors import error_body
from payment_proxy.config import Settings

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


def register_cors(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allowed_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Authorization",
            "X-Requested-With",
            "Accept",
            "Origin",
            REQUEST_ID_HEADER,
        ],
        max_age=86400,
    )


def register_origin_guard(app: FastAPI, settings: Settings) -> None:
    """Reject any request carrying an Origin outside the allow-list.

    Requests without an Origin header (server-to-server, curl, webhooks) pass.
    """
    allowed = frozenset(settings.cors_allowed_origins)

    @app.middleware("http")
    async def origin_guard(request: Request, call_next):
        origin = request.headers.get("origin")
        if origin and origin not in allowed:
            logger.warning("cors_origin_blocked", origin=origin, path=request.url.path)
            return JSONResponse(
                status_code=403,
                content=error_body("Not allowed by CORS", origin, settings),
            )
        return await call_next(request)


def register_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def request_logging(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        structlog.contextvars.bind_contextvars(request_id=request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            for name, value in SECURITY_HEADERS.items():
                response.headers.setdefault(name, value)

            logger.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            return response
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
