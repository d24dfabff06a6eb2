"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: input for a single requested line.
- ``CreateOrderDTO``: input for order creation (nested items).
- ``OrderItemData``: a priced line handed to ``IOrderRepository.create``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single item in a creation request.

    The client sends ``product_id`` and ``quantity``; the unit price is
    resolved by the Service Layer from the product catalog.
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    Validates:
    - ``items`` must contain at least one item.
    - Each item quantity must be positive.

    The same product may appear more than once; the service sums the
    quantities per product.
    """

    model_config = ConfigDict(frozen=True)

    customer_id: UUID
    items: List[CreateOrderItemDTO]

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v


class OrderItemData(BaseModel):
    """A validated, priced order line ready to be persisted."""

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    unit_price: Decimal
    quantity: int
