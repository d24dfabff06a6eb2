"""Integration tests for the Product API."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.integration

URL = "/api/v1/products/"


class TestCreateProduct:
    def test_creates_product(self, api_client):
        response = api_client.post(
            URL,
            {"name": "Widget", "price": "19.90", "stock_quantity": 4},
            format="json",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["price"] == "19.90"
        assert data["stock_quantity"] == 4
        assert Product.objects.get(id=data["id"]).stock_quantity == 4

    def test_negative_price_returns_400(self, api_client):
        response = api_client.post(
            URL, {"name": "Widget", "price": "-1.00"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "price"

    @pytest.mark.parametrize(
        "price, code",
        [("10.005", "decimal_max_places"), ("123456789012.50", "decimal_max_digits")],
    )
    def test_price_outside_column_precision_returns_400(self, api_client, price, code):
        response = api_client.post(URL, {"name": "Widget", "price": price}, format="json")

        assert response.status_code == 400
        error = response.json()["errors"][0]
        assert error["attr"] == "price"
        assert error["code"] == code
        assert Product.objects.count() == 0

    def test_missing_price_returns_400(self, api_client):
        response = api_client.post(URL, {"name": "Widget"}, format="json")

        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"


class TestReadProduct:
    def test_retrieve(self, api_client, product_a):
        response = api_client.get(f"{URL}{product_a.id}/")

        assert response.status_code == 200
        assert response.json()["stock_quantity"] == 5

    def test_retrieve_unknown_returns_404(self, api_client):
        response = api_client.get(f"{URL}{uuid4()}/")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "product_not_found"

    def test_list_in_stock_filter(self, api_client, product_a, product_b):
        Product.objects.filter(id=product_b.id).update(stock_quantity=0)

        response = api_client.get(f"{URL}?in_stock=true")
        assert [p["id"] for p in response.json()["results"]] == [str(product_a.id)]

        response = api_client.get(f"{URL}?in_stock=false")
        assert [p["id"] for p in response.json()["results"]] == [str(product_b.id)]

    def test_price_range_filter(self, api_client, product_a, product_b):
        response = api_client.get(f"{URL}?min_price=15")
        assert [p["id"] for p in response.json()["results"]] == [str(product_b.id)]
