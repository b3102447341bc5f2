"""
Request logging middleware package for Product Proxy Service.
"""

from .request_logging import (
    RequestLoggingMiddleware,
    correlation_id_from_headers,
    setup_request_logging,
)

__all__ = [
    "RequestLoggingMiddleware",
    "correlation_id_from_headers",
    "setup_request_logging",
]
