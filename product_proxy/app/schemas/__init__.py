from .pagination import PagedResponse, PaginationParameters
from .product import Product, ProductData

__all__ = ["PagedResponse", "PaginationParameters", "Product", "ProductData"]
