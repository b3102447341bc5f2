"""Product API endpoints"""

from typing import Optional

from fastapi import APIRouter, Request, Response, status

from ...core.exceptions import ProductNotFoundError, UpstreamRejectedError
from ...core.settings import get_settings
from ...schemas.pagination import PagedResponse, PaginationParameters
from ...schemas.product import Product
from ...services.product_gateway import ProductGateway
from ...utils.logging import setup_proxy_logging as setup_logging
from ...validators.product_validator import ProductValidator
from ..dependencies import (
    CorrelationIdDep,
    PaginationDep,
    ProductGatewayDep,
    ProductValidatorDep,
)

settings = get_settings()
logger = setup_logging(
    "products_api",
    log_level=settings.LOG_LEVEL,
    enable_file_logging=settings.file_logging_enabled,
)
router = APIRouter()


@router.get(
    "",
    response_model=PagedResponse[Product],
    response_model_exclude_none=True,
)
@router.get(
    "/",
    response_model=PagedResponse[Product],
    response_model_exclude_none=True,
    include_in_schema=False,
)
async def list_products(
    params: PaginationParameters = PaginationDep,
    correlation_id: Optional[str] = CorrelationIdDep,
    gateway: ProductGateway = ProductGatewayDep,
):
    """List one page of products, optionally filtered by name"""
    logger.info(
        "Retrieving products",
        extra={
            "page_number": params.page_number,
            "page_size": params.page_size,
            "name_filter": params.name_filter or "none",
            "correlation_id": correlation_id,
        },
    )

    page = await gateway.get_products(params, correlation_id=correlation_id)

    logger.info(
        "Retrieved products",
        extra={
            "returned": len(page.items),
            "total_count": page.total_count,
            "correlation_id": correlation_id,
        },
    )
    return page


@router.get("/{product_id}", response_model=Product, response_model_exclude_none=True)
async def get_product(
    product_id: str,
    correlation_id: Optional[str] = CorrelationIdDep,
    gateway: ProductGateway = ProductGatewayDep,
):
    """Get product details by ID"""
    product = await gateway.get_by_id(product_id, correlation_id=correlation_id)
    if product is None:
        logger.warning(
            "Product not found",
            extra={"product_id": product_id, "correlation_id": correlation_id},
        )
        raise ProductNotFoundError(product_id)

    return product


@router.post(
    "",
    response_model=Product,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
@router.post(
    "/",
    response_model=Product,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
async def create_product(
    request: Request,
    response: Response,
    product: Product,
    correlation_id: Optional[str] = CorrelationIdDep,
    gateway: ProductGateway = ProductGatewayDep,
    validator: ProductValidator = ProductValidatorDep,
):
    """Create a product; Location points at the new resource"""
    validator.ensure_valid(product)

    logger.info(
        "Creating product",
        extra={"product_name": product.name, "correlation_id": correlation_id},
    )

    created = await gateway.create(product, correlation_id=correlation_id)
    if not created.id:
        # without an id there is nothing to point Location at
        raise UpstreamRejectedError("create")

    response.headers["Location"] = str(
        request.url_for("get_product", product_id=created.id)
    )
    return created


@router.put("/{product_id}", response_model=Product, response_model_exclude_none=True)
async def update_product(
    product_id: str,
    product: Product,
    correlation_id: Optional[str] = CorrelationIdDep,
    gateway: ProductGateway = ProductGatewayDep,
    validator: ProductValidator = ProductValidatorDep,
):
    """Replace a product; the path id wins over any id in the body"""
    validator.ensure_valid(product)

    existing = await gateway.get_by_id(product_id, correlation_id=correlation_id)
    if existing is None:
        logger.warning(
            "Product not found for update",
            extra={"product_id": product_id, "correlation_id": correlation_id},
        )
        raise ProductNotFoundError(product_id)

    product = product.model_copy(update={"id": product_id})
    return await gateway.update(product_id, product, correlation_id=correlation_id)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    correlation_id: Optional[str] = CorrelationIdDep,
    gateway: ProductGateway = ProductGatewayDep,
):
    """Delete a product"""
    existing = await gateway.get_by_id(product_id, correlation_id=correlation_id)
    if existing is None:
        logger.warning(
            "Product not found for deletion",
            extra={"product_id": product_id, "correlation_id": correlation_id},
        )
        raise ProductNotFoundError(product_id)

    if not await gateway.delete(product_id, correlation_id=correlation_id):
        raise UpstreamRejectedError("delete")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
