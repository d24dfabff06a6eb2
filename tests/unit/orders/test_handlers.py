"""Unit tests for Orders event handlers and in-memory bus."""

from __future__ import annotations

import logging
from uuid import uuid4

import pytest

from modules.orders.events import OrderCreated
from modules.orders.handlers import OrderCreatedHandler, order_created_handler
from shared.infrastructure.bus import InMemoryEventBus, event_bus

pytestmark = pytest.mark.unit


def test_order_created_handler_logs(caplog):
    handler = OrderCreatedHandler()
    event = OrderCreated(aggregate_id=uuid4(), customer_id="c-1", item_count=2)

    with caplog.at_level(logging.INFO, logger="modules.orders.handlers"):
        handler.handle(event)

    assert any(
        "order.event.created" in record.getMessage()
        and str(event.aggregate_id) in record.getMessage()
        for record in caplog.records
    )


def test_in_memory_event_bus_routes_events():
    bus = InMemoryEventBus()
    handled = []

    class CapturingHandler:
        def handle(self, event) -> None:
            handled.append(event)

    handler = CapturingHandler()
    event = OrderCreated(aggregate_id=uuid4())

    bus.subscribe(OrderCreated, handler)
    bus.subscribe(OrderCreated, handler)

    assert bus.publish(event) == 1
    assert handled == [event]


def test_publish_without_handlers_returns_zero():
    assert InMemoryEventBus().publish(OrderCreated(aggregate_id=uuid4())) == 0


def test_app_registers_order_created_handler():
    assert order_created_handler in event_bus._handlers[OrderCreated]
