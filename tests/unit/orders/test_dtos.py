"""Unit tests for Order DTOs."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, OrderItemData

pytestmark = pytest.mark.unit


class TestCreateOrderItemDTO:
    def test_valid_item(self):
        product_id = uuid4()
        dto = CreateOrderItemDTO(product_id=product_id, quantity=2)
        assert dto.product_id == product_id
        assert dto.quantity == 2

    def test_product_id_parsed_from_string(self):
        product_id = uuid4()
        dto = CreateOrderItemDTO(product_id=str(product_id), quantity=1)
        assert dto.product_id == product_id

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_rejected(self, quantity):
        with pytest.raises(ValidationError, match="Quantity must be at least 1"):
            CreateOrderItemDTO(product_id=uuid4(), quantity=quantity)

    def test_invalid_product_id_rejected(self):
        with pytest.raises(ValidationError):
            CreateOrderItemDTO(product_id="not-a-uuid", quantity=1)

    def test_frozen(self):
        dto = CreateOrderItemDTO(product_id=uuid4(), quantity=1)
        with pytest.raises(ValidationError):
            dto.quantity = 5


class TestCreateOrderDTO:
    def test_valid_order(self):
        dto = CreateOrderDTO(
            customer_id=uuid4(),
            items=[CreateOrderItemDTO(product_id=uuid4(), quantity=1)],
        )
        assert len(dto.items) == 1

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            CreateOrderDTO(customer_id=uuid4(), items=[])

    def test_repeated_products_allowed(self):
        product_id = uuid4()
        dto = CreateOrderDTO(
            customer_id=uuid4(),
            items=[
                {"product_id": product_id, "quantity": 1},
                {"product_id": product_id, "quantity": 2},
            ],
        )
        assert [item.quantity for item in dto.items] == [1, 2]


class TestOrderItemData:
    def test_holds_price_snapshot(self):
        data = OrderItemData(product_id=uuid4(), unit_price=Decimal("9.90"), quantity=3)
        assert data.unit_price == Decimal("9.90")
