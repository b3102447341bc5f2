"""Product proxy error taxonomy"""

from typing import Any, Dict, List, Optional


class ProductProxyError(Exception):
    """Base class for errors raised by the product proxy"""


class ProductValidationError(ProductProxyError):
    """Inbound product payload or paging values failed validation"""

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        super().__init__(
            "; ".join(f"{e['field']}: {e['message']}" for e in errors)
            or "Validation failed"
        )


class ProductNotFoundError(ProductProxyError):
    """Product does not exist upstream"""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found")


class UpstreamRejectedError(ProductProxyError):
    """Upstream answered a mutating call with a non-success status"""

    def __init__(self, operation: str, status_code: Optional[int] = None):
        self.operation = operation
        self.status_code = status_code
        super().__init__(f"Failed to {operation} product")


class UpstreamUnavailableError(ProductProxyError):
    """Transport, timeout or server failure talking to upstream"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
