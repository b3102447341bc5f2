"""
Error handling middleware package for Product Proxy Service.
"""

from .error_handler import ProxyErrorHandler, setup_proxy_error_handling

__all__ = ["ProxyErrorHandler", "setup_proxy_error_handling"]
