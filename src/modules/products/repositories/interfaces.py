"""Product repository interface.

The product catalog consumed by order creation: a batch look-up that
silently omits unknown ids and an all-or-nothing absolute stock write.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Sequence, Union
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.dtos import StockUpdate
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_all_by_ids(
        self, ids: Sequence[Union[UUID, str]], for_update: bool = False
    ) -> List[Product]:
        """Return the existing products among ``ids``.

        Unknown ids are omitted; callers detect them by comparing sets.
        With ``for_update=True`` the rows stay locked until the caller's
        transaction ends (must be called inside ``transaction.atomic``).
        """

    @abstractmethod
    def update_quantities(self, updates: Sequence[StockUpdate]) -> None:
        """Overwrite each product's stock with an absolute value.

        Applies every update or none.

        Raises:
            ConcurrentModification: a product vanished or its stock no
                longer matches ``expected_quantity``.
        """
