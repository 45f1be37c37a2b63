"""
In-memory Order Repository Implementation.

Used by tests and for running the service without a database
(ORDER_DB_API=memory). Orders are stored in serialized form so reads go
through the same round-trip as the real backends.
"""
from typing import Any, Dict, List, Sequence
import copy
import logging

from core.domain.entities.order import Order
from core.domain.enums import OrderStatus
from core.domain.exceptions import OrderNotFoundError
from core.domain.repositories.order_repository import OrderRepository, sort_by_order_id


logger = logging.getLogger(__name__)


class InMemoryOrderRepository(OrderRepository):
    """
    In-memory implementation of OrderRepository.

    Stores order documents in a dictionary keyed by order id.
    """

    def __init__(self):
        """Initialize empty storage."""
        self._storage: Dict[str, Dict[str, Any]] = {}
        logger.info("InMemoryOrderRepository initialized (in-memory storage)")

    async def insert_orders(self, orders: Sequence[Order]) -> None:
        inserted = 0
        for order in orders:
            if order.order_id in self._storage:
                logger.info(f"Order {order.order_id} already stored, skipping duplicate")
                continue
            self._storage[order.order_id] = copy.deepcopy(order.to_document())
            inserted += 1
        logger.debug(f"Inserted {inserted} of {len(orders)} order(s) into memory")

    async def get_pending_orders(self) -> List[Order]:
        pending = [
            Order.from_document(copy.deepcopy(document))
            for document in self._storage.values()
            if document["status"] == OrderStatus.PENDING
        ]
        return sort_by_order_id(pending)

    async def get_order(self, order_id: str) -> Order:
        document = self._storage.get(order_id)
        if document is None:
            raise OrderNotFoundError(order_id)
        return Order.from_document(copy.deepcopy(document))

    async def update_order(self, order: Order) -> None:
        document = self._storage.get(order.order_id)
        if document is None:
            raise OrderNotFoundError(order.order_id)
        document.update(copy.deepcopy(order.to_document()))

    def count(self) -> int:
        """Number of stored orders (for tests)."""
        return len(self._storage)

    def clear(self) -> None:
        """Clear all orders (for tests)."""
        self._storage.clear()
        logger.info("In-memory repository cleared")
