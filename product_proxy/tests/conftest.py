"""
Pytest configuration and fixtures for product proxy tests.
"""

import os
from typing import Any, Dict, List
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi.testclient import TestClient

# Set up test environment variables before importing anything else
os.environ.setdefault("APP_NAME", "Product Proxy Test")
os.environ.setdefault("APP_VERSION", "1.0.0")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("SERVICE_NAME", "product-proxy")
os.environ.setdefault("UPSTREAM_BASE_URL", "http://upstream.test")
os.environ.setdefault("UPSTREAM_COLLECTION_PATH", "/objects")
os.environ.setdefault("REQUEST_TIMEOUT", "5")

from product_proxy.app.api.dependencies import get_product_gateway  # noqa: E402
from product_proxy.app.core.settings import ProxySettings  # noqa: E402
from product_proxy.app.main import create_app  # noqa: E402
from product_proxy.app.schemas.product import Product  # noqa: E402
from product_proxy.app.services.product_gateway import ProductGateway  # noqa: E402


@pytest.fixture
def upstream_objects() -> List[Dict[str, Any]]:
    """Raw upstream collection, including an object with null data."""
    return [
        {
            "id": "1",
            "name": "Apple MacBook Pro 16",
            "data": {
                "year": 2019,
                "price": 1849.99,
                "CPU_model": "Intel Core i9",
                "Hard_disk_size": "1 TB",
            },
        },
        {"id": "2", "name": "Apple Watch", "data": {"year": 2021, "price": 399}},
        {"id": "3", "name": "Galaxy Watch", "data": {"year": 2022, "price": 299.5}},
        {"id": "4", "name": "Google Pixel 6 Pro", "data": None},
        {"id": "5", "name": "Phone", "data": {"year": 2020, "price": 100}},
    ]


@pytest.fixture
def sample_products(upstream_objects) -> List[Product]:
    return [Product.model_validate(item) for item in upstream_objects]


@pytest.fixture
def valid_payload() -> Dict[str, Any]:
    """Client payload that passes every validation rule."""
    return {
        "name": "Apple MacBook Pro 16",
        "data": {
            "year": 2020,
            "price": 1849.99,
            "CPU_model": "Intel Core i9",
            "Hard_disk_size": "1 TB",
        },
    }


@pytest.fixture
def mock_http_client():
    """httpx.AsyncClient stand-in; tests set request.return_value/side_effect."""
    return AsyncMock(spec=httpx.AsyncClient)


@pytest.fixture
def gateway(mock_http_client) -> ProductGateway:
    return ProductGateway(
        base_url="http://upstream.test",
        collection_path="/objects",
        timeout=5,
        http_client=mock_http_client,
    )


@pytest.fixture
def mock_gateway():
    """Gateway double for API tests."""
    return AsyncMock(spec=ProductGateway)


@pytest.fixture
def app(mock_gateway):
    application = create_app(ProxySettings(DEBUG=False))
    application.dependency_overrides[get_product_gateway] = lambda: mock_gateway
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)
