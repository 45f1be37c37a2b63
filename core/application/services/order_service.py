"""Application service for Order operations."""

import asyncio
import logging
from typing import Awaitable, List, Optional, TypeVar

from core.application.dtos.order_dto import OrderUpdateRequest
from core.application.interfaces import OrderQueue
from core.domain.entities.order import Order, parse_status
from core.domain.enums import USER_SETTABLE_STATUSES
from core.domain.exceptions import MalformedRequestError, OperationTimeoutError
from core.domain.repositories import OrderRepository
from core.domain.value_objects import canonical_order_id


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 30.0

# Store metadata (Mongo _id, Cosmos _etag/_ts/...) is never client-writable.
RESERVED_FIELD_PREFIX = "_"


class OrderService:
    """
    Facade over one order repository and one order queue.

    Responsibilities:
    - Drain the queue into storage (intake pipeline)
    - Validate and apply status updates
    - Bound every storage/queue call with the request timeout

    Holds no mutable state beyond its collaborators, so one instance is
    shared by all concurrent requests.
    """

    def __init__(
        self,
        repository: OrderRepository,
        queue: OrderQueue,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize order service.

        Args:
            repository: Storage backend
            queue: Incoming order queue
            timeout_seconds: Upper bound for each storage/queue call
        """
        self._repository = repository
        self._queue = queue
        self._timeout_seconds = timeout_seconds

    async def fetch_orders(self) -> List[Order]:
        """Drain newly queued orders into storage and list pending orders.

        1. Poll the queue once for whatever is visible now
        2. Stamp every received order as Pending
        3. Insert the batch (duplicates are absorbed by the repository)
        4. Acknowledge the batch
        5. Return every order currently pending

        Messages are acknowledged only after a successful insert, so a
        failed insert leaves them on the queue for redelivery.

        Returns:
            All pending orders, including ones from earlier calls

        Raises:
            QueueError: If polling or acknowledging fails
            RepositoryError: If insert or listing fails
            OperationTimeoutError: If a call exceeds the timeout
        """
        messages = await self._call("receive_orders", self._queue.receive_orders())

        new_orders = [message.order for message in messages]
        for order in new_orders:
            order.mark_pending()

        if new_orders:
            await self._call("insert_orders", self._repository.insert_orders(new_orders))
            logger.info(f"Inserted {len(new_orders)} new order(s) into the database")
            await self._call("acknowledge", self._queue.acknowledge(messages))

        pending_orders = await self._call(
            "get_pending_orders", self._repository.get_pending_orders()
        )
        logger.info(f"Returning {len(pending_orders)} pending order(s)")
        return pending_orders

    async def get_order(self, order_id: str) -> Order:
        """Get order by id.

        Args:
            order_id: Raw order id; canonicalized before lookup

        Raises:
            MalformedRequestError: If the id is not a valid integer string
            OrderNotFoundError: If no order has this id
        """
        canonical_id = canonical_order_id(order_id)
        return await self._call(
            "get_order", self._repository.get_order(canonical_id), order_id=canonical_id
        )

    async def update_order(self, request: OrderUpdateRequest) -> Order:
        """Validate and apply a status update.

        Only Processing and Complete may be requested. The stored order must
        exist and may only stay at its status or advance one stage.

        Args:
            request: Update carrying orderId, status and optional extra fields

        Returns:
            The order as stored after the update

        Raises:
            MalformedRequestError: Bad id or disallowed status, or an extra field
                reserved for the order store
            OrderNotFoundError: If no order has this id
            InvalidStatusTransitionError: Backward move or skipped stage
        """
        order_id = canonical_order_id(request.order_id)
        status = parse_status(request.status)
        if status not in USER_SETTABLE_STATUSES:
            raise MalformedRequestError(
                f"Unsupported status for update: {status.name}", order_id=order_id
            )
        reserved = sorted(name for name in request.extra_fields if name.startswith(RESERVED_FIELD_PREFIX))
        if reserved:
            raise MalformedRequestError(
                f"Fields reserved for the order store: {reserved}", order_id=order_id
            )

        current = await self._call(
            "get_order", self._repository.get_order(order_id), order_id=order_id
        )
        current.advance_to(status)

        changes = Order(order_id=order_id, status=status, payload=request.extra_fields)
        await self._call(
            "update_order", self._repository.update_order(changes), order_id=order_id
        )

        current.payload.update(changes.payload)
        logger.info(f"Order {order_id} updated to {status.name}")
        return current

    async def _call(self, operation: str, awaitable: Awaitable[T], order_id: Optional[str] = None) -> T:
        """Await a collaborator call, cancelling it when the timeout expires."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout_seconds)
        except asyncio.TimeoutError:
            context = f" (order {order_id})" if order_id else ""
            logger.error(f"{operation} timed out after {self._timeout_seconds}s{context}")
            raise OperationTimeoutError(
                f"{operation} timed out after {self._timeout_seconds}s", order_id=order_id
            ) from None
