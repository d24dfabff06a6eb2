"""Django ORM implementation of the Product repository.

Stock reads for order creation lock the rows (``SELECT ... FOR UPDATE``,
ordered by primary key so concurrent orders acquire locks in the same
order).  Stock writes are conditional updates: a row whose stock moved
since it was read is reported as ``ConcurrentModification`` instead of
being silently overwritten.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from modules.core.exceptions import ConcurrentModification
from modules.products.dtos import StockUpdate
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """List products with optional Django ORM look-ups.

        Example::

            {"name__icontains": "widget", "stock_quantity__gt": 0}
        """
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info("product.saved", product_id=str(entity.id), name=entity.name)
        return entity

    # ------------------------------------------------------------------
    # Catalog operations used by order creation
    # ------------------------------------------------------------------

    def get_all_by_ids(
        self, ids: Sequence[Union[UUID, str]], for_update: bool = False
    ) -> List[Product]:
        if not ids:
            return []
        try:
            queryset = Product.objects.filter(id__in=list(ids)).order_by("id")
            if for_update:
                queryset = queryset.select_for_update()
            return list(queryset)
        except (ValueError, ValidationError):
            return []

    @transaction.atomic
    def update_quantities(self, updates: Sequence[StockUpdate]) -> None:
        # Runs in a savepoint: a failed update undoes the earlier ones.
        now = timezone.now()
        for update in sorted(updates, key=lambda u: str(u.product_id)):
            queryset = Product.objects.filter(id=update.product_id)
            if update.expected_quantity is not None:
                queryset = queryset.filter(stock_quantity=update.expected_quantity)
            changed = queryset.update(stock_quantity=update.quantity, updated_at=now)
            if changed != 1:
                logger.warning(
                    "product.stock_conflict",
                    product_id=str(update.product_id),
                    expected_quantity=update.expected_quantity,
                )
                raise ConcurrentModification(
                    f"Product {update.product_id} stock changed during the update."
                )

        logger.info("product.stock_updated", product_count=len(updates))
