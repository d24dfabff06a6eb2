"""Unit tests for domain event primitives."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.orders.events import OrderCreated
from modules.orders.models import Order
from shared.domain.events import DomainEvent

pytestmark = pytest.mark.unit


def test_order_registers_and_clears_domain_events():
    order = Order(customer_id=uuid4())

    assert order.domain_events == []

    event = OrderCreated(aggregate_id=order.id)
    order.add_domain_event(event)

    assert order.domain_events == [event]
    assert event.event_name == "OrderCreated"

    order.clear_domain_events()
    assert order.domain_events == []


def test_payload_is_json_safe():
    event = OrderCreated(aggregate_id=uuid4(), total_amount="12.50", item_count=1)

    payload = event.to_payload()

    assert payload["aggregate_id"] == str(event.aggregate_id)
    assert payload["event_id"] == str(event.event_id)
    assert payload["occurred_on"] == event.occurred_on.isoformat()
    assert payload["event_name"] == "OrderCreated"


def test_event_rebuilt_from_payload():
    event = OrderCreated(
        aggregate_id=uuid4(), customer_id="c-1", total_amount="60.00", item_count=2
    )

    rebuilt = DomainEvent.from_payload("OrderCreated", event.to_payload())

    assert rebuilt == event


def test_unknown_event_name_raises():
    with pytest.raises(KeyError):
        DomainEvent.from_payload("NoSuchEvent", {"aggregate_id": str(uuid4())})
