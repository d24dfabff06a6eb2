"""In-memory repositories for OrderService unit tests.

They honour the repository contracts without touching Django models, so
the service logic is exercised in isolation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID, uuid4

import pytest

from modules.core.exceptions import ConcurrentModification
from modules.orders.services import OrderService
from shared.domain.events import DomainEventMixin


@dataclass
class StubCustomer:
    name: str
    id: UUID = field(default_factory=uuid4)


@dataclass
class StubProduct:
    name: str
    price: Decimal
    stock_quantity: int
    id: UUID = field(default_factory=uuid4)


@dataclass
class StubOrderItem:
    product_id: UUID
    quantity: int
    unit_price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class StubOrder(DomainEventMixin):
    customer: StubCustomer
    items: List[StubOrderItem]
    id: UUID = field(default_factory=uuid4)

    @property
    def total_amount(self) -> Decimal:
        return sum((item.subtotal for item in self.items), Decimal("0.00"))


class InMemoryCustomerRepository:
    def __init__(self) -> None:
        self.customers: Dict[str, StubCustomer] = {}

    def add(self, customer: StubCustomer) -> StubCustomer:
        self.customers[str(customer.id)] = customer
        return customer

    def get_by_id(self, id: str) -> Optional[StubCustomer]:
        return self.customers.get(str(id))


class InMemoryProductRepository:
    def __init__(self) -> None:
        self.products: Dict[UUID, StubProduct] = {}
        self.locked_reads = 0

    def add(self, product: StubProduct) -> StubProduct:
        self.products[product.id] = product
        return product

    def get_all_by_ids(self, ids, for_update: bool = False) -> List[StubProduct]:
        if for_update:
            self.locked_reads += 1
        # Copies, so the service never mutates stored state directly.
        return [
            StubProduct(
                name=self.products[pid].name,
                price=self.products[pid].price,
                stock_quantity=self.products[pid].stock_quantity,
                id=pid,
            )
            for pid in ids
            if pid in self.products
        ]

    def update_quantities(self, updates) -> None:
        for update in updates:
            current = self.products[update.product_id].stock_quantity
            if (
                update.expected_quantity is not None
                and current != update.expected_quantity
            ):
                raise ConcurrentModification(f"{update.product_id} changed")
        for update in updates:
            self.products[update.product_id].stock_quantity = update.quantity


class InMemoryOrderRepository:
    def __init__(self) -> None:
        self.orders: Dict[str, StubOrder] = {}
        self.published_events: list = []

    def create(self, customer, items) -> StubOrder:
        order = StubOrder(
            customer=customer,
            items=[
                StubOrderItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
                for item in items
            ],
        )
        self.orders[str(order.id)] = order
        return order

    def get_by_id(self, id: str) -> Optional[StubOrder]:
        return self.orders.get(str(id))

    def list(self, filters=None) -> List[StubOrder]:
        return list(self.orders.values())

    def save(self, entity: StubOrder) -> StubOrder:
        self.published_events.extend(entity.domain_events)
        entity.clear_domain_events()
        self.orders[str(entity.id)] = entity
        return entity


@pytest.fixture()
def customers():
    return InMemoryCustomerRepository()


@pytest.fixture()
def products():
    return InMemoryProductRepository()


@pytest.fixture()
def orders():
    return InMemoryOrderRepository()


@pytest.fixture()
def service(orders, customers, products):
    return OrderService(
        order_repository=orders,
        customer_repository=customers,
        product_repository=products,
    )


@pytest.fixture()
def c1(customers):
    return customers.add(StubCustomer(name="C1"))


@pytest.fixture()
def p1(products):
    return products.add(StubProduct(name="P1", price=Decimal("10.00"), stock_quantity=5))


@pytest.fixture()
def p2(products):
    return products.add(StubProduct(name="P2", price=Decimal("20.00"), stock_quantity=2))
