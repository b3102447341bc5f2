"""
FastAPI dependency injection for Product Proxy Service

Provides the upstream gateway, the payload validator, pagination parameters
and correlation ID resolution to the API endpoints.
"""

from typing import Optional

from fastapi import Depends, Query, Request
from pydantic import ValidationError

from ..core.exceptions import ProductValidationError
from ..core.settings import ProxySettings, get_settings
from ..middleware.logging.request_logging import correlation_id_from_headers
from ..schemas.pagination import DEFAULT_PAGE_SIZE, PaginationParameters
from ..services.product_gateway import ProductGateway
from ..validators.product_validator import ProductValidator

# =====================================================
# SERVICE DEPENDENCIES
# =====================================================


def get_proxy_settings() -> ProxySettings:
    return get_settings()


def get_product_gateway(request: Request) -> ProductGateway:
    """Provide the gateway created in the application lifespan"""
    gateway = getattr(request.app.state, "product_gateway", None)
    if gateway is None:
        raise RuntimeError("Product gateway not initialized")
    return gateway


_validator = ProductValidator()


def get_product_validator() -> ProductValidator:
    return _validator


# =====================================================
# REQUEST CONTEXT DEPENDENCIES
# =====================================================


def get_correlation_id(request: Request) -> Optional[str]:
    """Correlation ID resolved by the request logging middleware

    Falls back to the request headers when the middleware is disabled.
    """
    correlation_id = getattr(request.state, "correlation_id", None)
    return correlation_id or correlation_id_from_headers(request)


def get_pagination_parameters(
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize"),
    name_filter: Optional[str] = Query(None, alias="nameFilter"),
) -> PaginationParameters:
    """Build paging parameters from the query string, capping the page size"""
    try:
        return PaginationParameters(
            page_number=page_number, page_size=page_size, name_filter=name_filter
        )
    except ValidationError as e:
        raise ProductValidationError(
            [
                {
                    "field": ".".join(str(loc) for loc in error["loc"]),
                    "message": error["msg"],
                }
                for error in e.errors()
            ]
        ) from e


# =====================================================
# COMMON DEPENDENCY ALIASES
# =====================================================

CorrelationIdDep = Depends(get_correlation_id)
ProductGatewayDep = Depends(get_product_gateway)
ProductValidatorDep = Depends(get_product_validator)
PaginationDep = Depends(get_pagination_parameters)
SettingsDep = Depends(get_proxy_settings)
