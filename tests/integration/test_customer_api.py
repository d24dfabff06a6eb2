"""Integration tests for the Customer API."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.customers.models import Customer

pytestmark = pytest.mark.integration

URL = "/api/v1/customers/"


class TestCreateCustomer:
    def test_creates_customer(self, api_client):
        response = api_client.post(
            URL, {"name": "Joao Souza", "email": "Joao@Example.com"}, format="json"
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Joao Souza"
        assert data["email"] == "joao@example.com"
        assert Customer.objects.filter(id=data["id"]).exists()

    def test_duplicate_email_returns_409(self, api_client, customer):
        response = api_client.post(
            URL, {"name": "Other", "email": customer.email}, format="json"
        )

        assert response.status_code == 409
        error = response.json()["errors"][0]
        assert error["code"] == "customer_already_exists"
        assert error["attr"] == "email"

    def test_invalid_email_returns_400(self, api_client):
        response = api_client.post(
            URL, {"name": "Joao", "email": "nope"}, format="json"
        )

        assert response.status_code == 400
        data = response.json()
        assert data["type"] == "validation_error"
        assert data["errors"][0]["attr"] == "email"

    def test_missing_name_returns_400(self, api_client):
        response = api_client.post(URL, {"email": "joao@example.com"}, format="json")

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "name"


class TestReadCustomer:
    def test_retrieve(self, api_client, customer):
        response = api_client.get(f"{URL}{customer.id}/")

        assert response.status_code == 200
        assert response.json()["email"] == "maria@example.com"

    def test_retrieve_unknown_returns_404(self, api_client):
        response = api_client.get(f"{URL}{uuid4()}/")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "customer_not_found"

    def test_list_and_search(self, api_client, customer):
        Customer.objects.create(name="Ana Lima", email="ana@example.com")

        assert api_client.get(URL).json()["count"] == 2
        response = api_client.get(f"{URL}?search=maria")
        assert [c["id"] for c in response.json()["results"]] == [str(customer.id)]

    def test_filter_by_email(self, api_client, customer):
        response = api_client.get(f"{URL}?email=MARIA@example.com")
        assert response.json()["count"] == 1
