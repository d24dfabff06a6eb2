"""Order domain exceptions.

Raised by the Service Layer when order creation is rejected.  Every
validation failure is raised before any write, so nothing is persisted.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from typing import Iterable
from uuid import UUID


class OrderNotFound(Exception):
    """The requested order does not exist."""


class CustomerNotFound(Exception):
    """The customer referenced by the order does not exist."""


class ProductNotFound(Exception):
    """One or more products referenced by order items do not exist."""

    def __init__(self, product_ids: Iterable[UUID]) -> None:
        self.product_ids = list(product_ids)
        joined = ", ".join(str(product_id) for product_id in self.product_ids)
        super().__init__(f"Products not found: {joined}.")


class InsufficientStock(Exception):
    """A product does not have enough stock for the requested quantity."""

    def __init__(
        self, product_id: UUID, product_name: str, requested: int, available: int
    ) -> None:
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f'Product "{product_name}" does not have enough quantity: '
            f"requested {requested}, available {available}."
        )
