"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``StockUpdate``: one absolute stock write handed to
  ``IProductRepository.update_quantities``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` is not blank.
    - ``price`` is a non-negative Decimal with at most 8 integer digits
      and 2 decimal places (no silent rounding).
    - ``stock_quantity`` is non-negative.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    # Same precision as ``Product.price``.
    price: Decimal = Field(max_digits=10, decimal_places=2)
    description: str = ""
    stock_quantity: int = 0

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock_quantity")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v


class StockUpdate(BaseModel):
    """New absolute stock level for one product.

    ``expected_quantity`` is the stock observed when the write was computed;
    when set, the write only applies if the row still holds that value
    (compare-and-swap).
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int
    expected_quantity: Optional[int] = None

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v
