"""Order service layer (Use Cases).

Orchestrates order creation: multi-entity validation, price snapshot,
order persistence and stock decrement, all inside one database
transaction; the service defines the unit-of-work boundary.

Consistency guarantees of ``create_order``:
- Every validation failure is raised before the first write.
- Product rows are read with ``SELECT ... FOR UPDATE``, so the stock
  check and the stock write of one order are serialized against other
  orders touching the same products.
- Stock writes are compare-and-swap on the observed quantity; a row that
  changed anyway (backends without row locks) aborts the whole order with
  ``ConcurrentModification``.
- Any failure up to and including the commit rolls back the order, its
  items and every stock change together, and surfaces as ``StorageError``
  when the database raised it.
- Success is logged only once the transaction has committed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence
from uuid import UUID

import structlog
from django.db import DatabaseError, transaction

from modules.core.exceptions import StorageError
from modules.orders.dtos import OrderItemData
from modules.orders.events import OrderCreated
from modules.orders.exceptions import (
    CustomerNotFound,
    InsufficientStock,
    OrderNotFound,
    ProductNotFound,
)
from modules.products.dtos import StockUpdate

if TYPE_CHECKING:
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        customer_repository: ICustomerRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._customer_repo = customer_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create an order and decrement stock for every ordered product.

        Steps:
        1. Resolve the customer.
        2. Sum requested quantities per product (submission order kept).
        3. Load and lock all requested products in one batch.
        4. Reject unknown products, then insufficient stock.
        5. Persist the order with price-snapshot items.
        6. Write the new absolute stock levels.
        7. Record ``OrderCreated`` in the outbox.

        Not idempotent: each call is a new order.

        Raises:
            CustomerNotFound: customer does not exist.
            ProductNotFound: one or more products do not exist.
            InsufficientStock: a product's stock is below the request.
            ConcurrentModification: stock changed between read and write.
            StorageError: the database failed during a read, a write or
                the commit.
        """
        log = logger.bind(customer_id=str(dto.customer_id))
        log.info("order.creation_started", item_count=len(dto.items))

        # The commit itself is inside the try: deferred constraints fail there.
        try:
            with transaction.atomic():
                order = self._place_order(dto, log)
        except DatabaseError as exc:
            log.error("order.persist_failed", error=str(exc))
            raise StorageError("Could not persist the order.") from exc

        # Re-fetch with prefetch for output
        order_with_relations = self._order_repo.get_by_id(str(order.id))
        return order_with_relations or order

    def _place_order(self, dto: CreateOrderDTO, log: Any) -> Order:
        # 1. Validate customer
        customer = self._customer_repo.get_by_id(str(dto.customer_id))
        if not customer:
            log.warning("order.customer_not_found")
            raise CustomerNotFound(f"Customer {dto.customer_id} not found.")

        # 2-3. Batch load products, rows locked until commit
        requested = self._aggregate_quantities(dto.items)
        products = self._product_repo.get_all_by_ids(list(requested), for_update=True)
        products_by_id = {product.id: product for product in products}

        # 4. Validate existence, then stock
        missing = [pid for pid in requested if pid not in products_by_id]
        if missing:
            log.warning("order.products_not_found", product_ids=[str(p) for p in missing])
            raise ProductNotFound(missing)

        for product_id, quantity in requested.items():
            product = products_by_id[product_id]
            if product.stock_quantity - quantity < 0:
                log.warning(
                    "order.insufficient_stock",
                    product_id=str(product_id),
                    requested=quantity,
                    available=product.stock_quantity,
                )
                raise InsufficientStock(
                    product_id=product_id,
                    product_name=product.name,
                    requested=quantity,
                    available=product.stock_quantity,
                )

        # 5-7. Writes: order, stock, outbox
        items = [
            OrderItemData(
                product_id=product_id,
                unit_price=products_by_id[product_id].price,
                quantity=quantity,
            )
            for product_id, quantity in requested.items()
        ]
        stock_updates = [
            StockUpdate(
                product_id=product_id,
                quantity=products_by_id[product_id].stock_quantity - quantity,
                expected_quantity=products_by_id[product_id].stock_quantity,
            )
            for product_id, quantity in requested.items()
        ]
        order = self._order_repo.create(customer, items)
        self._product_repo.update_quantities(stock_updates)
        order.add_domain_event(
            OrderCreated(
                aggregate_id=order.id,
                customer_id=str(customer.id),
                total_amount=str(order.total_amount),
                item_count=len(items),
            )
        )
        self._order_repo.save(order)

        def log_committed() -> None:
            for update in stock_updates:
                log.info(
                    "order.stock_reserved",
                    product_id=str(update.product_id),
                    quantity=requested[update.product_id],
                    remaining=update.quantity,
                )
            log.info(
                "order.created",
                order_id=str(order.id),
                total_amount=str(order.total_amount),
            )

        transaction.on_commit(log_committed)
        return order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Return a list of orders, optionally filtered."""
        return self._order_repo.list(filters)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _aggregate_quantities(items: Sequence[CreateOrderItemDTO]) -> Dict[UUID, int]:
        """Sum quantities per product id, keyed in first-occurrence order."""
        requested: Dict[UUID, int] = {}
        for item in items:
            requested[item.product_id] = requested.get(item.product_id, 0) + item.quantity
        return requested
