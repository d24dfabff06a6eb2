from decimal import Decimal

import pytest

from rest_framework.test import APIClient

from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def order_service():
    """OrderService wired to the Django ORM repositories."""
    return OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


@pytest.fixture()
def customer():
    return Customer.objects.create(name="Maria Silva", email="maria@example.com")


@pytest.fixture()
def product_a():
    """P1: price 10.00, stock 5."""
    return Product.objects.create(
        name="Product A", price=Decimal("10.00"), stock_quantity=5
    )


@pytest.fixture()
def product_b():
    """P2: price 20.00, stock 2."""
    return Product.objects.create(
        name="Product B", price=Decimal("20.00"), stock_quantity=2
    )
