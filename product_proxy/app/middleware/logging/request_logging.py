"""
HTTP request logging middleware for Product Proxy Service.

Logs the request/response lifecycle with timing, assigns a request id and
resolves the correlation id that the gateway forwards upstream. Both ids are
echoed back as response headers.
"""

import time
import uuid
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI

from product_proxy.app.core.settings import get_settings
from product_proxy.app.utils.logging import setup_proxy_logging

settings = get_settings()
logger = setup_proxy_logging(
    "product_proxy_request_logging",
    log_level=settings.LOG_LEVEL,
    enable_file_logging=settings.file_logging_enabled,
)

SLOW_REQUEST_MS = 1000

# Checked in order; the first non-empty value is the correlation id
CORRELATION_ID_HEADERS = ("X-Correlation-ID", "correlation-id", "X-Request-ID")


def correlation_id_from_headers(request: Request) -> Optional[str]:
    for header in CORRELATION_ID_HEADERS:
        value = request.headers.get(header)
        if value:
            return value
    return None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Request lifecycle logging with request and correlation ids"""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = str(uuid.uuid4())
        correlation_id = correlation_id_from_headers(request) or str(uuid.uuid4())
        start_time = time.time()

        request.state.request_id = request_id
        request.state.correlation_id = correlation_id

        logger.info(
            "HTTP request started",
            extra={
                "request_id": request_id,
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "client_ip": self._get_client_ip(request),
                "event_type": "http_request_start",
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"HTTP request failed: {str(e)}",
                extra={
                    "request_id": request_id,
                    "correlation_id": correlation_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": round((time.time() - start_time) * 1000, 2),
                    "error_type": type(e).__name__,
                    "event_type": "http_request_error",
                },
                exc_info=True,
            )
            raise

        duration_ms = round((time.time() - start_time) * 1000, 2)

        if response.status_code >= 500:
            log_level = "ERROR"
        elif response.status_code >= 400 or duration_ms > SLOW_REQUEST_MS:
            log_level = "WARNING"
        else:
            log_level = "INFO"

        getattr(logger, log_level.lower())(
            "HTTP request completed",
            extra={
                "request_id": request_id,
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "event_type": "http_request_complete",
                "success": response.status_code < 400,
                "slow_request": duration_ms > SLOW_REQUEST_MS,
            },
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Response-Time"] = str(duration_ms)
        return response

    def _get_client_ip(self, request: Request) -> str:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return "unknown"


def setup_request_logging(app: "FastAPI") -> None:
    """Register request logging middleware"""
    app.add_middleware(RequestLoggingMiddleware)
    logger.info(
        "Request logging middleware configured",
        extra={"event_type": "middleware_setup", "middleware": "request_logging"},
    )
