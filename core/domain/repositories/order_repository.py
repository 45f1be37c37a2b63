"""Repository interface for Order persistence."""

from abc import ABC, abstractmethod
from typing import List, Sequence

from ..entities.order import Order


class OrderRepository(ABC):
    """
    Abstract repository for Order persistence.

    Every storage backend implements exactly these four operations with the
    same semantics, so callers never branch on which backend is configured.
    """

    @abstractmethod
    async def insert_orders(self, orders: Sequence[Order]) -> None:
        """Insert a batch of orders.

        An empty batch is a no-op. An order whose id is already stored is
        skipped without error (queue redelivery). A failure on one record
        does not drop the others.

        Args:
            orders: Orders to insert

        Raises:
            RepositoryError: If any record could not be stored
        """
        pass

    @abstractmethod
    async def get_pending_orders(self) -> List[Order]:
        """List every order whose status is Pending.

        Returns:
            Pending orders, sorted by numeric order id
        """
        pass

    @abstractmethod
    async def get_order(self, order_id: str) -> Order:
        """Retrieve order by its canonical id.

        Args:
            order_id: Canonical order id

        Returns:
            The stored order

        Raises:
            OrderNotFoundError: If no order has this id
        """
        pass

    @abstractmethod
    async def update_order(self, order: Order) -> None:
        """Replace status and supplied fields of an existing order.

        Args:
            order: Order carrying the canonical id and the new values

        Raises:
            OrderNotFoundError: If no order has this id
        """
        pass


def sort_by_order_id(orders: Sequence[Order]) -> List[Order]:
    """Deterministic listing order shared by all backends."""
    return sorted(orders, key=lambda order: int(order.order_id))
