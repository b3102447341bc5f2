"""
API tests for /api/products with the upstream gateway replaced by a mock.
"""

import pytest
from fastapi.testclient import TestClient

from product_proxy.app.core.exceptions import (
    UpstreamRejectedError,
    UpstreamUnavailableError,
)
from product_proxy.app.schemas.pagination import PagedResponse, PaginationParameters
from product_proxy.app.schemas.product import Product
from product_proxy.app.services.pagination import paginate

BASE = "/api/products"
GENERIC_ERROR = "An error occurred while processing your request"


class TestListProducts:
    @pytest.fixture(autouse=True)
    def paginate_for_real(self, mock_gateway, sample_products):
        """Gateway double that pages the sample collection like the real one."""

        async def get_products(params, correlation_id=None):
            return paginate(sample_products, params)

        mock_gateway.get_products.side_effect = get_products

    def test_default_page(self, client: TestClient):
        response = client.get(BASE)

        assert response.status_code == 200
        body = response.json()
        assert body["pageNumber"] == 1
        assert body["pageSize"] == 10
        assert body["totalCount"] == 5
        assert body["totalPages"] == 1
        assert body["hasPrevious"] is False
        assert body["hasNext"] is False
        assert len(body["items"]) == 5

    def test_trailing_slash_served(self, client: TestClient):
        assert client.get(f"{BASE}/").status_code == 200

    def test_filter_and_page(self, client: TestClient):
        response = client.get(
            BASE, params={"nameFilter": "watch", "pageSize": 1, "pageNumber": 1}
        )

        assert response.status_code == 200
        body = response.json()
        assert [item["name"] for item in body["items"]] == ["Apple Watch"]
        assert body["totalCount"] == 2
        assert body["totalPages"] == 2
        assert body["hasNext"] is True

    def test_page_size_clamped(self, client: TestClient, mock_gateway):
        response = client.get(BASE, params={"pageSize": 1000})

        assert response.status_code == 200
        assert response.json()["pageSize"] == 50
        params = mock_gateway.get_products.call_args.args[0]
        assert isinstance(params, PaginationParameters)
        assert params.page_size == 50

    def test_page_beyond_range(self, client: TestClient):
        response = client.get(BASE, params={"pageNumber": 4, "pageSize": 2})

        body = response.json()
        assert response.status_code == 200
        assert body["items"] == []
        assert body["totalCount"] == 5
        assert body["pageNumber"] == 4

    def test_absent_fields_omitted(self, client: TestClient):
        items = client.get(BASE).json()["items"]

        watch = next(item for item in items if item["name"] == "Apple Watch")
        assert watch == {"id": "2", "name": "Apple Watch", "data": {"year": 2021, "price": 399.0}}
        macbook = next(item for item in items if item["id"] == "1")
        assert macbook["data"]["CPU_model"] == "Intel Core i9"
        assert macbook["data"]["Hard_disk_size"] == "1 TB"

    @pytest.mark.parametrize(
        "query", [{"pageNumber": 0}, {"pageSize": 0}, {"pageNumber": "abc"}]
    )
    def test_invalid_paging_values(self, client: TestClient, query):
        response = client.get(BASE, params=query)

        assert response.status_code == 400
        assert response.json()["error"]["type"] == "validation_error"

    def test_upstream_outage(self, client: TestClient, mock_gateway):
        mock_gateway.get_products.side_effect = UpstreamUnavailableError("dns failure")

        response = client.get(BASE)

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["message"] == GENERIC_ERROR
        assert "dns failure" not in response.text

    def test_unexpected_error_is_generic_500(self, client: TestClient, mock_gateway):
        mock_gateway.get_products.side_effect = RuntimeError("secret detail")

        response = client.get(BASE)

        assert response.status_code == 500
        assert response.headers["content-type"] == "application/json"
        assert response.json()["error"]["message"] == GENERIC_ERROR
        assert "secret detail" not in response.text


class TestGetProduct:
    def test_found(self, client: TestClient, mock_gateway, sample_products):
        mock_gateway.get_by_id.return_value = sample_products[0]

        response = client.get(f"{BASE}/1")

        assert response.status_code == 200
        assert response.json()["name"] == "Apple MacBook Pro 16"
        mock_gateway.get_by_id.assert_awaited_once()
        assert mock_gateway.get_by_id.call_args.args[0] == "1"

    def test_not_found(self, client: TestClient, mock_gateway):
        mock_gateway.get_by_id.return_value = None

        response = client.get(f"{BASE}/nope")

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Product with ID nope not found"

    def test_upstream_outage(self, client: TestClient, mock_gateway):
        mock_gateway.get_by_id.side_effect = UpstreamUnavailableError("boom", 502)

        response = client.get(f"{BASE}/1")

        assert response.status_code == 500
        assert response.json()["error"]["message"] == GENERIC_ERROR


class TestCreateProduct:
    def test_created(self, client: TestClient, mock_gateway, valid_payload):
        mock_gateway.create.return_value = Product.model_validate(
            {**valid_payload, "id": "abc123"}
        )

        response = client.post(BASE, json=valid_payload)

        assert response.status_code == 201
        assert response.headers["location"].endswith(f"{BASE}/abc123")
        body = response.json()
        assert body["id"] == "abc123"
        assert body["data"]["CPU_model"] == "Intel Core i9"
        sent = mock_gateway.create.call_args.args[0]
        assert sent.name == valid_payload["name"]

    def test_zero_price_rejected(self, client: TestClient, mock_gateway, valid_payload):
        valid_payload["data"]["price"] = 0

        response = client.post(BASE, json=valid_payload)

        assert response.status_code == 400
        errors = response.json()["error"]["details"]["validation_errors"]
        assert {"field": "data.price", "message": "Price must be greater than 0"} in errors
        mock_gateway.create.assert_not_called()

    def test_missing_name_and_old_year(self, client: TestClient, valid_payload):
        valid_payload["name"] = ""
        valid_payload["data"]["year"] = 1850

        response = client.post(BASE, json=valid_payload)

        assert response.status_code == 400
        fields = [
            e["field"] for e in response.json()["error"]["details"]["validation_errors"]
        ]
        assert fields == ["name", "data.year"]

    def test_malformed_body_is_400(self, client: TestClient, mock_gateway):
        response = client.post(
            BASE, json={"name": "Laptop", "data": {"year": "soon", "price": 10}}
        )

        assert response.status_code == 400
        assert response.json()["error"]["type"] == "validation_error"
        mock_gateway.create.assert_not_called()

    def test_upstream_failure_is_400(self, client: TestClient, mock_gateway, valid_payload):
        mock_gateway.create.side_effect = UpstreamRejectedError("create", 500)

        response = client.post(BASE, json=valid_payload)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Failed to create product"

    def test_created_without_id_is_400(self, client: TestClient, mock_gateway, valid_payload):
        mock_gateway.create.return_value = Product.model_validate(valid_payload)

        response = client.post(BASE, json=valid_payload)

        assert response.status_code == 400

    def test_transport_failure_is_500(self, client: TestClient, mock_gateway, valid_payload):
        mock_gateway.create.side_effect = UpstreamUnavailableError("refused")

        response = client.post(BASE, json=valid_payload)

        assert response.status_code == 500


class TestUpdateProduct:
    def test_updated_with_path_id(
        self, client: TestClient, mock_gateway, sample_products, valid_payload
    ):
        mock_gateway.get_by_id.return_value = sample_products[0]
        mock_gateway.update.return_value = Product.model_validate(
            {**valid_payload, "id": "1"}
        )

        response = client.put(f"{BASE}/1", json={**valid_payload, "id": "999"})

        assert response.status_code == 200
        assert response.json()["id"] == "1"
        product_id, sent = mock_gateway.update.call_args.args[:2]
        assert product_id == "1"
        assert sent.id == "1"

    def test_not_found_before_update(self, client: TestClient, mock_gateway, valid_payload):
        mock_gateway.get_by_id.return_value = None

        response = client.put(f"{BASE}/missing", json=valid_payload)

        assert response.status_code == 404
        mock_gateway.update.assert_not_called()

    def test_validation_before_lookup(self, client: TestClient, mock_gateway, valid_payload):
        valid_payload["data"]["price"] = -5

        response = client.put(f"{BASE}/1", json=valid_payload)

        assert response.status_code == 400
        mock_gateway.get_by_id.assert_not_called()

    def test_upstream_failure_is_400(
        self, client: TestClient, mock_gateway, sample_products, valid_payload
    ):
        mock_gateway.get_by_id.return_value = sample_products[0]
        mock_gateway.update.side_effect = UpstreamRejectedError("update", 405)

        response = client.put(f"{BASE}/1", json=valid_payload)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Failed to update product"


class TestDeleteProduct:
    def test_deleted(self, client: TestClient, mock_gateway, sample_products):
        mock_gateway.get_by_id.return_value = sample_products[0]
        mock_gateway.delete.return_value = True

        response = client.delete(f"{BASE}/1")

        assert response.status_code == 204
        assert response.content == b""

    def test_not_found(self, client: TestClient, mock_gateway):
        mock_gateway.get_by_id.return_value = None

        response = client.delete(f"{BASE}/missing")

        assert response.status_code == 404
        mock_gateway.delete.assert_not_called()

    def test_upstream_refused(self, client: TestClient, mock_gateway, sample_products):
        mock_gateway.get_by_id.return_value = sample_products[0]
        mock_gateway.delete.return_value = False

        response = client.delete(f"{BASE}/1")

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Failed to delete product"


class TestRequestContext:
    def test_correlation_id_round_trip(self, client: TestClient, mock_gateway):
        mock_gateway.get_by_id.return_value = None

        response = client.get(f"{BASE}/x", headers={"X-Correlation-ID": "corr-42"})

        assert response.headers["X-Correlation-ID"] == "corr-42"
        assert response.json()["error"]["correlation_id"] == "corr-42"
        assert mock_gateway.get_by_id.call_args.kwargs["correlation_id"] == "corr-42"

    def test_request_id_header_used_as_correlation_id(
        self, client: TestClient, mock_gateway
    ):
        mock_gateway.get_by_id.return_value = None

        response = client.get(f"{BASE}/x", headers={"X-Request-ID": "rid-1"})

        assert response.headers["X-Correlation-ID"] == "rid-1"
        assert response.json()["error"]["correlation_id"] == "rid-1"
        assert mock_gateway.get_by_id.call_args.kwargs["correlation_id"] == "rid-1"

    def test_request_id_assigned(self, client: TestClient, mock_gateway):
        mock_gateway.get_products.return_value = PagedResponse[Product]()

        response = client.get(BASE)

        assert response.headers["X-Request-ID"]
        assert response.headers["X-Correlation-ID"]


class TestHealth:
    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert set(body["checks"]) == {"basic", "upstream_config"}
