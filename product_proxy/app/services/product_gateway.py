"""Upstream gateway for the third-party product collection"""

import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ..core.exceptions import UpstreamRejectedError, UpstreamUnavailableError
from ..core.settings import ProxySettings, get_settings
from ..schemas.pagination import PagedResponse, PaginationParameters
from ..schemas.product import Product
from ..utils.logging import setup_proxy_logging as setup_logging
from .pagination import paginate

settings = get_settings()
logger = setup_logging(
    "product_gateway",
    log_level=settings.LOG_LEVEL,
    enable_file_logging=settings.file_logging_enabled,
)


class ProductGateway:
    """HTTP client for the upstream ``/objects`` collection.

    Holds no state besides its HTTP client. A client passed in is left open
    on ``close()``; a client created here is closed with the gateway.
    """

    def __init__(
        self,
        base_url: str,
        collection_path: str = "/objects",
        timeout: int = 30,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.collection_url = f"{self.base_url}/{collection_path.strip('/')}"
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
        )

    @classmethod
    def from_settings(
        cls, settings: ProxySettings, http_client: Optional[httpx.AsyncClient] = None
    ) -> "ProductGateway":
        return cls(
            base_url=settings.UPSTREAM_BASE_URL,
            collection_path=settings.UPSTREAM_COLLECTION_PATH,
            timeout=settings.REQUEST_TIMEOUT,
            http_client=http_client,
        )

    async def close(self):
        """Close HTTP client if this gateway created it"""
        if self._owns_client:
            await self.http_client.aclose()

    def _item_url(self, product_id: str) -> str:
        return f"{self.collection_url}/{quote(product_id, safe='')}"

    async def _send(
        self,
        method: str,
        url: str,
        correlation_id: Optional[str] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Issue one upstream request; transport failures become UpstreamUnavailableError"""
        headers = {"Accept": "application/json"}
        if correlation_id:
            headers["X-Correlation-ID"] = correlation_id

        start_time = time.time()
        try:
            response = await self.http_client.request(
                method=method, url=url, headers=headers, json=json
            )
        except httpx.TimeoutException as e:
            logger.error(
                "Upstream request timeout",
                extra={
                    "method": method,
                    "url": url,
                    "correlation_id": correlation_id,
                    "error": str(e),
                },
            )
            raise UpstreamUnavailableError(
                f"Upstream request timed out: {method} {url}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(
                "Upstream request error",
                extra={
                    "method": method,
                    "url": url,
                    "correlation_id": correlation_id,
                    "error_type": type(e).__name__,
                    "error": str(e),
                },
            )
            raise UpstreamUnavailableError(
                f"Error communicating with upstream: {method} {url}"
            ) from e

        logger.info(
            "Upstream request completed",
            extra={
                "method": method,
                "url": url,
                "status_code": response.status_code,
                "response_time_ms": round((time.time() - start_time) * 1000, 2),
                "correlation_id": correlation_id,
            },
        )
        return response

    async def list_all(self, correlation_id: Optional[str] = None) -> List[Product]:
        """Fetch the entire upstream collection in upstream order"""
        response = await self._send("GET", self.collection_url, correlation_id)
        if not response.is_success:
            raise UpstreamUnavailableError(
                f"Upstream list failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
            if not payload:
                logger.warning(
                    "No products returned from upstream",
                    extra={"correlation_id": correlation_id},
                )
                return []
            if not isinstance(payload, list):
                raise ValueError("expected a JSON array")
            return [Product.model_validate(item) for item in payload]
        except ValueError as e:
            raise UpstreamUnavailableError(
                f"Unexpected upstream list payload: {e}"
            ) from e

    async def get_by_id(
        self, product_id: str, correlation_id: Optional[str] = None
    ) -> Optional[Product]:
        """Fetch one product; None when upstream answers 404"""
        response = await self._send("GET", self._item_url(product_id), correlation_id)

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.info(
                "Product not found upstream",
                extra={"product_id": product_id, "correlation_id": correlation_id},
            )
            return None

        if not response.is_success:
            raise UpstreamUnavailableError(
                f"Upstream get failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return Product.model_validate(response.json())
        except ValueError as e:
            raise UpstreamUnavailableError(
                f"Unexpected upstream product payload: {e}"
            ) from e

    async def create(
        self, product: Product, correlation_id: Optional[str] = None
    ) -> Product:
        """Create a product; the result carries the upstream-assigned id"""
        response = await self._send(
            "POST",
            self.collection_url,
            correlation_id,
            json=product.to_upstream_payload(),
        )
        created = self._parse_mutation_result(response, "create", correlation_id)

        logger.info(
            "Product created upstream",
            extra={"product_id": created.id, "correlation_id": correlation_id},
        )
        return created

    async def update(
        self, product_id: str, product: Product, correlation_id: Optional[str] = None
    ) -> Product:
        """Replace the product stored under ``product_id``"""
        response = await self._send(
            "PUT",
            self._item_url(product_id),
            correlation_id,
            json=product.to_upstream_payload(),
        )
        updated = self._parse_mutation_result(response, "update", correlation_id)

        logger.info(
            "Product updated upstream",
            extra={"product_id": product_id, "correlation_id": correlation_id},
        )
        return updated

    async def delete(self, product_id: str, correlation_id: Optional[str] = None) -> bool:
        """Delete a product; False when upstream answers with a non-success status"""
        response = await self._send(
            "DELETE", self._item_url(product_id), correlation_id
        )

        if not response.is_success:
            logger.warning(
                "Failed to delete product upstream",
                extra={
                    "product_id": product_id,
                    "status_code": response.status_code,
                    "correlation_id": correlation_id,
                },
            )
            return False

        logger.info(
            "Product deleted upstream",
            extra={"product_id": product_id, "correlation_id": correlation_id},
        )
        return True

    async def get_products(
        self, params: PaginationParameters, correlation_id: Optional[str] = None
    ) -> PagedResponse[Product]:
        """Fetch everything, filter by name, return the requested page"""
        products = await self.list_all(correlation_id)
        page = paginate(products, params)

        logger.info(
            "Product page assembled",
            extra={
                "upstream_count": len(products),
                "total_count": page.total_count,
                "page_number": page.page_number,
                "page_size": page.page_size,
                "returned": len(page.items),
                "name_filter": params.name_filter,
                "correlation_id": correlation_id,
            },
        )
        return page

    def _parse_mutation_result(
        self, response: httpx.Response, operation: str, correlation_id: Optional[str]
    ) -> Product:
        # Any non-success status counts as a rejection, 5xx included
        if not response.is_success:
            logger.warning(
                f"Failed to {operation} product upstream",
                extra={
                    "status_code": response.status_code,
                    "correlation_id": correlation_id,
                },
            )
            raise UpstreamRejectedError(operation, status_code=response.status_code)

        try:
            payload = response.json()
            if payload is None:
                raise ValueError("empty body")
            return Product.model_validate(payload)
        except ValueError as e:
            logger.warning(
                f"Upstream {operation} returned no usable product",
                extra={"error": str(e), "correlation_id": correlation_id},
            )
            raise UpstreamRejectedError(
                operation, status_code=response.status_code
            ) from e
