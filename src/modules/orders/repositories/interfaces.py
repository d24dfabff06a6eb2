"""Order repository interface.

The order store consumed by order creation.  ``create`` is the only
writer of new order identifiers; ``save`` flushes collected domain
events into the outbox.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Sequence

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer
    from modules.orders.dtos import OrderItemData
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The aggregate includes its OrderItem children; creation is atomic.
    """

    @abstractmethod
    def create(self, customer: Customer, items: Sequence[OrderItemData]) -> Order:
        """Assign an id and persist the order with its items, in order.

        Returns the populated order with ``total_amount`` computed.
        """
