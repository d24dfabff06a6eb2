"""Integration tests for OrderDjangoRepository."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.core.models import OutboxEvent
from modules.orders.dtos import OrderItemData
from modules.orders.events import OrderCreated
from modules.orders.repositories.django_repository import OUTBOX_TOPIC, OrderDjangoRepository

pytestmark = pytest.mark.integration


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


@pytest.fixture()
def order(repo, customer, product_a, product_b):
    return repo.create(
        customer,
        [
            OrderItemData(product_id=product_b.id, unit_price=Decimal("20.00"), quantity=1),
            OrderItemData(product_id=product_a.id, unit_price=Decimal("10.00"), quantity=3),
        ],
    )


class TestCreate:
    def test_persists_items_in_submission_order(self, repo, order, product_a, product_b):
        stored = repo.get_by_id(str(order.id))
        assert [item.product_id for item in stored.items.all()] == [
            product_b.id,
            product_a.id,
        ]
        assert [item.position for item in stored.items.all()] == [0, 1]

    def test_total_is_sum_of_subtotals(self, order):
        assert order.total_amount == Decimal("50.00")
        assert [item.subtotal for item in order.items.all()] == [
            Decimal("20.00"),
            Decimal("30.00"),
        ]

    def test_price_snapshot_survives_catalog_change(self, repo, order, product_a):
        product_a.price = Decimal("99.00")
        product_a.save()

        stored = repo.get_by_id(str(order.id))
        assert stored.items.get(product=product_a).unit_price == Decimal("10.00")


class TestReads:
    def test_get_by_id_missing(self, repo):
        assert repo.get_by_id(str(uuid4())) is None

    def test_get_by_invalid_id(self, repo):
        assert repo.get_by_id("not-a-uuid") is None

    def test_list_filters(self, repo, order, customer):
        assert repo.list({"customer_id": customer.id}) == [order]
        assert repo.list({"customer_id": uuid4()}) == []

    def test_queryset_prefetches_relations(self, repo, order, django_assert_num_queries):
        with django_assert_num_queries(3):
            orders = list(repo.queryset())
            for item in orders[0].items.all():
                assert item.product.name
            assert orders[0].customer.name


class TestSave:
    def test_writes_pending_events_to_outbox(self, repo, order):
        order.add_domain_event(OrderCreated(aggregate_id=order.id))

        repo.save(order)

        record = OutboxEvent.objects.get()
        assert record.event_type == "OrderCreated"
        assert record.aggregate_id == str(order.id)
        assert record.topic == OUTBOX_TOPIC
        assert order.domain_events == []

    def test_save_without_events_writes_nothing(self, repo, order):
        repo.save(order)

        assert OutboxEvent.objects.count() == 0
