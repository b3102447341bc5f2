"""Service layer for Product Proxy Service"""

from .pagination import filter_by_name, paginate
from .product_gateway import ProductGateway

__all__ = [
    "ProductGateway",
    "filter_by_name",
    "paginate",
]
