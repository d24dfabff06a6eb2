"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` so the
Order aggregate (Order + OrderItems + outbox rows) is persisted atomically,
joining the caller's transaction when one is open.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.core.models import OutboxEvent
from modules.customers.models import Customer
from modules.orders.dtos import OrderItemData
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "orders"


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    @transaction.atomic
    def create(self, customer: Customer, items: Sequence[OrderItemData]) -> Order:
        order = Order(customer=customer)
        order.save()

        total = Decimal("0.00")
        for position, item_data in enumerate(items):
            item = OrderItem(
                order=order,
                product_id=item_data.product_id,
                position=position,
                quantity=item_data.quantity,
                unit_price=item_data.unit_price,
            )
            item.save()
            total += item.subtotal

        order.total_amount = total
        order.save(update_fields=["total_amount"])

        logger.info(
            "order.persisted",
            order_id=str(order.id),
            item_count=len(items),
            total_amount=str(total),
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def queryset(self) -> models.QuerySet:
        """Orders with customer and items eager-loaded (prevents N+1)."""
        return Order.objects.select_related("customer").prefetch_related(
            "items__product"
        )

    def summary_queryset(self) -> models.QuerySet:
        """Orders without relations, for listings that only show order columns."""
        return Order.objects.all()

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its customer and items.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return self.queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional Django ORM look-ups.

        Example::

            {"customer_id": "...", "created_at__date__gte": date(2026, 1, 1)}
        """
        queryset = self.queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    # ------------------------------------------------------------------
    # Save (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist an order and write its pending domain events to the outbox."""
        entity.save()

        events = entity.domain_events
        for event in events:
            OutboxEvent.objects.create(
                event_type=event.event_name,
                aggregate_id=str(event.aggregate_id),
                payload=event.to_payload(),
                topic=OUTBOX_TOPIC,
            )
        entity.clear_domain_events()

        logger.info("order.saved", order_id=str(entity.id), event_count=len(events))
        return entity
