"""
Error handling for Product Proxy Service.
Translates proxy exceptions into HTTP responses with a standard error envelope.
"""

import traceback
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from product_proxy.app.core.exceptions import (
    ProductNotFoundError,
    ProductValidationError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)
from product_proxy.app.core.settings import get_settings
from product_proxy.app.utils.logging import setup_proxy_logging

settings = get_settings()
logger = setup_proxy_logging(
    "product_proxy_error_handler",
    log_level=settings.LOG_LEVEL,
    enable_file_logging=settings.file_logging_enabled,
)

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request"


class ProxyErrorHandler:
    """
    Centralized error handling for Product Proxy Service.

    Every failure is translated once, here, into exactly one response:
    - Validation failures -> 400 with field-level details
    - Missing products -> 404
    - Upstream rejections of create/update/delete -> 400
    - Upstream outages and anything unexpected -> 500, no internal detail
    """

    @staticmethod
    def setup_error_handlers(app: FastAPI) -> None:
        """
        Setup all error handlers for the FastAPI application.
        """

        @app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(
            request: Request, exc: StarletteHTTPException
        ) -> JSONResponse:
            """Handle HTTP exceptions from Starlette/FastAPI."""
            return ProxyErrorHandler._create_error_response(
                request=request,
                status_code=exc.status_code,
                error_type="http_error",
                message=str(exc.detail),
                headers=getattr(exc, "headers", None),
            )

        @app.exception_handler(RequestValidationError)
        async def request_validation_exception_handler(
            request: Request, exc: RequestValidationError
        ) -> JSONResponse:
            """Malformed bodies and query values are client errors (400)."""
            error_details: List[Dict[str, Any]] = []
            for error in exc.errors():
                error_details.append(
                    {
                        "field": ".".join(
                            str(loc) for loc in error["loc"] if loc != "body"
                        ),
                        "message": error["msg"],
                    }
                )

            return ProxyErrorHandler._create_error_response(
                request=request,
                status_code=400,
                error_type="validation_error",
                message="Request validation failed",
                details={"validation_errors": error_details},
            )

        @app.exception_handler(ProductValidationError)
        async def product_validation_error_handler(
            request: Request, exc: ProductValidationError
        ) -> JSONResponse:
            return ProxyErrorHandler._create_error_response(
                request=request,
                status_code=400,
                error_type="validation_error",
                message="Request validation failed",
                details={"validation_errors": exc.errors},
            )

        @app.exception_handler(ProductNotFoundError)
        async def product_not_found_handler(
            request: Request, exc: ProductNotFoundError
        ) -> JSONResponse:
            return ProxyErrorHandler._create_error_response(
                request=request,
                status_code=404,
                error_type="not_found",
                message=str(exc),
                details={"product_id": exc.product_id},
            )

        @app.exception_handler(UpstreamRejectedError)
        async def upstream_rejected_handler(
            request: Request, exc: UpstreamRejectedError
        ) -> JSONResponse:
            return ProxyErrorHandler._create_error_response(
                request=request,
                status_code=400,
                error_type="upstream_rejected",
                message=str(exc),
                details={"operation": exc.operation},
            )

        @app.exception_handler(UpstreamUnavailableError)
        async def upstream_unavailable_handler(
            request: Request, exc: UpstreamUnavailableError
        ) -> JSONResponse:
            logger.error(
                "Upstream unavailable",
                extra={
                    "correlation_id": getattr(
                        request.state, "correlation_id", "unknown"
                    ),
                    "path": request.url.path,
                    "method": request.method,
                    "upstream_status": exc.status_code,
                    "error": str(exc),
                    "event_type": "upstream_unavailable",
                },
            )
            return ProxyErrorHandler._create_error_response(
                request=request,
                status_code=500,
                error_type="internal_server_error",
                message=GENERIC_ERROR_MESSAGE,
            )

        @app.exception_handler(Exception)
        async def unhandled_exception_handler(
            request: Request, exc: Exception
        ) -> JSONResponse:
            logger.error(
                "Unhandled exception occurred",
                extra={
                    "correlation_id": getattr(
                        request.state, "correlation_id", "unknown"
                    ),
                    "path": request.url.path,
                    "method": request.method,
                    "exception_type": type(exc).__name__,
                    "exception_message": str(exc),
                    "traceback": traceback.format_exc(),
                    "event_type": "unhandled_exception",
                },
                exc_info=True,
            )

            return ProxyErrorHandler._create_error_response(
                request=request,
                status_code=500,
                error_type="internal_server_error",
                message=GENERIC_ERROR_MESSAGE,
            )

    @staticmethod
    def _create_error_response(
        request: Request,
        status_code: int,
        error_type: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> JSONResponse:
        """
        Create a standardized error response.

        Args:
            request: The FastAPI request object
            status_code: HTTP status code
            error_type: Type of error for categorization
            message: Human-readable error message
            details: Additional error details
            headers: Extra response headers

        Returns:
            JSONResponse with standardized error format
        """
        correlation_id = getattr(request.state, "correlation_id", "unknown")

        error_response: Dict[str, Any] = {
            "error": {
                "type": error_type,
                "message": message,
                "correlation_id": correlation_id,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "path": request.url.path,
                "method": request.method,
            }
        }

        if details:
            error_response["error"]["details"] = details

        # 5xx responses are logged by their handlers
        if status_code < 500:
            logger.warning(
                f"Client error: {error_type}",
                extra={
                    "correlation_id": correlation_id,
                    "status_code": status_code,
                    "error_type": error_type,
                    "path": request.url.path,
                    "method": request.method,
                    "event_type": "client_error",
                },
            )

        return JSONResponse(
            status_code=status_code, content=error_response, headers=headers
        )


def setup_proxy_error_handling(app: FastAPI) -> None:
    """
    Convenience function to setup error handling for Product Proxy Service.

    Args:
        app: FastAPI application instance
    """
    ProxyErrorHandler.setup_error_handlers(app)

    logger.info(
        "Product Proxy error handling configured",
        extra={"event_type": "error_handler_setup"},
    )
