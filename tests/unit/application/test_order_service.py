"""Tests for OrderService - intake pipeline and status updates."""
import asyncio
from typing import List, Sequence

import pytest
import pytest_asyncio

from core.application.dtos.order_dto import OrderUpdateRequest
from core.application.services.order_service import OrderService
from core.domain.entities.order import Order
from core.domain.enums import OrderStatus
from core.domain.exceptions import (
    InvalidStatusTransitionError,
    MalformedRequestError,
    OperationTimeoutError,
    OrderNotFoundError,
    QueueError,
    RepositoryError,
)
from core.infrastructure.adapters.persistence.memory_order_repository import InMemoryOrderRepository
from tests.mocks.factories import order_document


class FlakyInsertRepository(InMemoryOrderRepository):
    """Fails the first N insert calls."""

    def __init__(self, failures: int = 1):
        super().__init__()
        self.failures = failures

    async def insert_orders(self, orders: Sequence[Order]) -> None:
        if self.failures:
            self.failures -= 1
            raise RepositoryError("database unavailable")
        await super().insert_orders(orders)


class SlowRepository(InMemoryOrderRepository):
    """Never answers get_pending_orders in time."""

    def __init__(self):
        super().__init__()
        self.cancelled = False

    async def get_pending_orders(self) -> List[Order]:
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return []


def update(order_id, status, **extra) -> OrderUpdateRequest:
    return OrderUpdateRequest(orderId=order_id, status=status, **extra)


# =============================================================================
# INTAKE PIPELINE
# =============================================================================

class TestFetchOrders:

    @pytest.mark.asyncio
    async def test_queued_orders_are_stored_as_pending(self, repository, queue):
        """New orders come back Pending regardless of the status they were queued with."""
        queue.push(order_document("1"))
        queue.push(order_document("2", status=int(OrderStatus.COMPLETE)))
        service = OrderService(repository, queue)

        pending = await service.fetch_orders()

        assert [order.order_id for order in pending] == ["1", "2"]
        assert all(order.status is OrderStatus.PENDING for order in pending)
        assert pending[0].payload["customerId"] == "customer-1"
        assert queue.outstanding == []

    @pytest.mark.asyncio
    async def test_empty_queue_still_lists_existing_backlog(self, repository, queue):
        await repository.insert_orders([Order(order_id="5", status=OrderStatus.PENDING)])
        service = OrderService(repository, queue)

        pending = await service.fetch_orders()

        assert [order.order_id for order in pending] == ["5"]
        assert queue.acknowledged == []

    @pytest.mark.asyncio
    async def test_processed_orders_are_not_listed(self, repository, queue):
        await repository.insert_orders([
            Order(order_id="1", status=OrderStatus.PENDING),
            Order(order_id="2", status=OrderStatus.PROCESSING),
        ])
        service = OrderService(repository, queue)

        pending = await service.fetch_orders()

        assert [order.order_id for order in pending] == ["1"]

    @pytest.mark.asyncio
    async def test_redelivered_order_is_stored_once(self, repository, queue):
        """The same orderId arriving twice yields one record and no error."""
        queue.push(order_document("1"))
        queue.push(order_document("1"))
        service = OrderService(repository, queue)

        pending = await service.fetch_orders()

        assert [order.order_id for order in pending] == ["1"]
        assert repository.count() == 1

    @pytest.mark.asyncio
    async def test_failed_insert_leaves_messages_for_redelivery(self, queue):
        repository = FlakyInsertRepository(failures=1)
        queue.push(order_document("1"))
        service = OrderService(repository, queue)

        with pytest.raises(RepositoryError):
            await service.fetch_orders()
        assert queue.outstanding == ["msg-1"]
        assert repository.count() == 0

        pending = await service.fetch_orders()
        assert [order.order_id for order in pending] == ["1"]
        assert queue.outstanding == []

    @pytest.mark.asyncio
    async def test_queue_failure_aborts_intake(self, repository, queue):
        queue.fail_receive = True
        service = OrderService(repository, queue)

        with pytest.raises(QueueError):
            await service.fetch_orders()

    @pytest.mark.asyncio
    async def test_slow_storage_times_out_and_is_cancelled(self, queue):
        repository = SlowRepository()
        service = OrderService(repository, queue, timeout_seconds=0.05)

        with pytest.raises(OperationTimeoutError):
            await service.fetch_orders()
        assert repository.cancelled


# =============================================================================
# GET ORDER
# =============================================================================

class TestGetOrder:

    @pytest.mark.asyncio
    async def test_lookup_uses_canonical_id(self, repository, queue):
        await repository.insert_orders([Order(order_id="7", status=OrderStatus.PENDING)])
        service = OrderService(repository, queue)

        order = await service.get_order("007")

        assert order.order_id == "7"

    @pytest.mark.asyncio
    async def test_invalid_id_is_malformed(self, repository, queue):
        with pytest.raises(MalformedRequestError):
            await OrderService(repository, queue).get_order("seven")

    @pytest.mark.asyncio
    async def test_unknown_id_is_not_found(self, repository, queue):
        with pytest.raises(OrderNotFoundError):
            await OrderService(repository, queue).get_order("404")


# =============================================================================
# STATUS UPDATE
# =============================================================================

class TestUpdateOrder:

    @pytest_asyncio.fixture
    async def service(self, repository, queue):
        await repository.insert_orders([Order(order_id="7", status=OrderStatus.PENDING)])
        return OrderService(repository, queue)

    @pytest.mark.asyncio
    async def test_processing_then_complete(self, service, repository):
        await service.update_order(update("7", OrderStatus.PROCESSING))
        assert (await repository.get_order("7")).status is OrderStatus.PROCESSING

        await service.update_order(update("7", OrderStatus.COMPLETE))
        assert (await repository.get_order("7")).status is OrderStatus.COMPLETE

    @pytest.mark.asyncio
    async def test_non_canonical_id_matches_stored_order(self, service, repository):
        await service.update_order(update("007", OrderStatus.PROCESSING))

        assert (await repository.get_order("7")).status is OrderStatus.PROCESSING
        assert repository.count() == 1

    @pytest.mark.asyncio
    async def test_repeating_an_update_is_allowed(self, service, repository):
        await service.update_order(update("7", OrderStatus.PROCESSING))
        await service.update_order(update("7", OrderStatus.PROCESSING))

        assert (await repository.get_order("7")).status is OrderStatus.PROCESSING

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [OrderStatus.NEW, OrderStatus.PENDING, 42])
    async def test_disallowed_statuses_are_rejected(self, service, repository, status):
        with pytest.raises(MalformedRequestError):
            await service.update_order(update("7", int(status)))
        assert (await repository.get_order("7")).status is OrderStatus.PENDING

    @pytest.mark.asyncio
    @pytest.mark.parametrize("order_id", ["", "abc", "-7"])
    async def test_bad_ids_are_rejected(self, service, order_id):
        with pytest.raises(MalformedRequestError):
            await service.update_order(update(order_id, OrderStatus.PROCESSING))

    @pytest.mark.asyncio
    async def test_unknown_order_is_not_found(self, service):
        with pytest.raises(OrderNotFoundError):
            await service.update_order(update("8", OrderStatus.PROCESSING))

    @pytest.mark.asyncio
    async def test_skipping_processing_is_rejected(self, service, repository):
        with pytest.raises(InvalidStatusTransitionError):
            await service.update_order(update("7", OrderStatus.COMPLETE))
        assert (await repository.get_order("7")).status is OrderStatus.PENDING

    @pytest.mark.asyncio
    async def test_extra_fields_are_stored(self, service, repository):
        returned = await service.update_order(update("7", OrderStatus.PROCESSING, assignedTo="station-3"))

        stored = await repository.get_order("7")
        assert stored.payload["assignedTo"] == "station-3"
        assert returned.payload["assignedTo"] == "station-3"
        assert returned.status is OrderStatus.PROCESSING

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["_id", "_etag", "_ts"])
    async def test_store_metadata_fields_are_rejected(self, service, repository, field):
        with pytest.raises(MalformedRequestError):
            await service.update_order(update("7", OrderStatus.PROCESSING, **{field: "x"}))

        stored = await repository.get_order("7")
        assert stored.status is OrderStatus.PENDING
        assert field not in stored.payload
