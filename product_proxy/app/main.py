"""
Product Proxy FastAPI Application
=================================

Entry point for the Product Proxy Service: a CRUD facade over a third-party
product collection, adding name filtering and pagination on the list path.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from product_proxy.app.api.v1.health import router as health_router
from product_proxy.app.api.v1.products import router as products_router
from product_proxy.app.core.settings import ProxySettings, get_settings
from product_proxy.app.middleware.error.error_handler import setup_proxy_error_handling
from product_proxy.app.middleware.logging.request_logging import setup_request_logging
from product_proxy.app.services.product_gateway import ProductGateway
from product_proxy.app.utils.logging import setup_proxy_logging

settings = get_settings()
environment = settings.ENVIRONMENT.lower()

logger = setup_proxy_logging(
    "product_proxy",
    log_level=settings.LOG_LEVEL,
    enable_file_logging=settings.file_logging_enabled,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the upstream HTTP client for the lifetime of the app."""
    startup_start = time.time()
    app_settings: ProxySettings = app.state.settings

    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(app_settings.REQUEST_TIMEOUT),
        limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
    )
    # A gateway installed before startup (tests) is kept as is
    owns_gateway = getattr(app.state, "product_gateway", None) is None
    if owns_gateway:
        app.state.product_gateway = ProductGateway.from_settings(
            app_settings, http_client=http_client
        )

    logger.info(
        "Product proxy started",
        extra={
            "environment": environment,
            "upstream": app_settings.UPSTREAM_BASE_URL,
            "request_timeout": app_settings.REQUEST_TIMEOUT,
            "startup_duration_ms": int((time.time() - startup_start) * 1000),
        },
    )

    try:
        yield
    finally:
        if owns_gateway:
            app.state.product_gateway = None
        await http_client.aclose()
        logger.info("Product proxy shutdown completed")


def create_app(app_settings: Optional[ProxySettings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
        debug=app_settings.DEBUG,
        lifespan=lifespan,
        openapi_url="/openapi.json" if app_settings.DEBUG else None,
        docs_url="/docs" if app_settings.DEBUG else None,
        redoc_url="/redoc" if app_settings.DEBUG else None,
    )
    app.state.settings = app_settings
    app.state.product_gateway = None

    _setup_middleware(app, app_settings)
    _setup_routers(app, app_settings)

    return app


def _setup_middleware(app: FastAPI, app_settings: ProxySettings) -> None:
    """Configure error handling, CORS and request logging."""
    setup_proxy_error_handling(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=app_settings.CORS_CREDENTIALS,
        allow_methods=app_settings.CORS_METHODS,
        allow_headers=app_settings.CORS_HEADERS,
    )
    logger.info(
        "CORS middleware configured",
        extra={
            "allowed_origins": len(app_settings.CORS_ORIGINS),
            "credentials_allowed": app_settings.CORS_CREDENTIALS,
        },
    )

    # Added last so it runs outermost and sees every response
    if app_settings.ENABLE_REQUEST_LOGGING:
        setup_request_logging(app)


def _setup_routers(app: FastAPI, app_settings: ProxySettings) -> None:
    """Configure application routers."""
    routers_info: list[dict[str, Any]] = []

    app.include_router(health_router, tags=["Health"])
    routers_info.append({"router": "health", "prefix": "", "tags": ["Health"]})

    app.include_router(
        products_router, prefix=app_settings.API_PREFIX, tags=["Products"]
    )
    routers_info.append(
        {"router": "products", "prefix": app_settings.API_PREFIX, "tags": ["Products"]}
    )

    logger.info(
        "API routes configured",
        extra={"total_routers": len(routers_info), "routers": routers_info},
    )


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "product_proxy.app.main:app",
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
    )
