"""
Azure Cosmos DB (SQL API) Order Repository Implementation.

Every document lives in one logical partition chosen per deployment. The
partition field name and value are captured once at construction and applied
to every read, query and write, so nothing outside this module ever sees
them. The Cosmos item id is the canonical orderId, which makes a redelivered
order collide (HTTP 409) instead of creating a second record.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence
import logging

from azure.cosmos import exceptions
from azure.cosmos.aio import ContainerProxy, CosmosClient

from core.domain.entities.order import ORDER_ID_FIELD, STATUS_FIELD, Order
from core.domain.enums import OrderStatus
from core.domain.exceptions import (
    ConfigurationError,
    MalformedRequestError,
    OrderNotFoundError,
    RepositoryError,
)
from core.domain.repositories.order_repository import OrderRepository, sort_by_order_id


logger = logging.getLogger(__name__)

ITEM_ID_FIELD = "id"
SYSTEM_PROPERTIES = ("_rid", "_self", "_etag", "_attachments", "_ts")
PENDING_QUERY = f"SELECT * FROM c WHERE c.{STATUS_FIELD} = @status"


@dataclass(frozen=True)
class CosmosPartition:
    """
    Partition key field name and the value every document is written with.

    The field belongs to the store: orders must not carry a payload field of
    the same name, since it is overwritten on write and dropped on read.
    """
    key: str
    value: str

    def __post_init__(self):
        if not self.key:
            raise ConfigurationError("Cosmos partition key name cannot be empty")
        if self.key in (ORDER_ID_FIELD, STATUS_FIELD, ITEM_ID_FIELD):
            raise ConfigurationError(
                f"Cosmos partition key cannot reuse the order field '{self.key}'"
            )


class CosmosOrderRepository(OrderRepository):
    """
    Cosmos DB SQL API implementation of OrderRepository.

    Construct with with_key() (shared account key) or
    with_workload_identity() (Azure AD workload/managed identity). Both give
    the same behaviour; only the credential differs.
    """

    def __init__(
        self,
        container: ContainerProxy,
        partition: CosmosPartition,
        client: Optional[CosmosClient] = None,
        credential: Optional[Any] = None,
    ):
        """
        Initialize repository with a container handle.

        Args:
            container: Cosmos container holding order items
            partition: Partition pair applied to every operation
            client: Owning client, closed by close() when given
            credential: Async token credential, closed by close() when given
        """
        self._container = container
        self._partition = partition
        self._client = client
        self._credential = credential

    @classmethod
    def with_key(
        cls,
        uri: str,
        db_name: str,
        container_name: str,
        key: str,
        partition: CosmosPartition,
    ) -> "CosmosOrderRepository":
        """Connect using the account's shared key."""
        if not key:
            raise ConfigurationError("ORDER_DB_PASSWORD is required for Cosmos key authentication")
        client = CosmosClient(uri, credential=key)
        logger.info("Using Cosmos DB shared key authentication")
        return cls._bind(client, db_name, container_name, partition)

    @classmethod
    def with_workload_identity(
        cls,
        uri: str,
        db_name: str,
        container_name: str,
        partition: CosmosPartition,
    ) -> "CosmosOrderRepository":
        """Connect using workload/managed identity (DefaultAzureCredential)."""
        from azure.identity.aio import DefaultAzureCredential

        credential = DefaultAzureCredential()
        client = CosmosClient(uri, credential=credential)
        logger.info("Using Cosmos DB workload identity authentication")
        return cls._bind(client, db_name, container_name, partition, credential=credential)

    @classmethod
    def _bind(
        cls,
        client: CosmosClient,
        db_name: str,
        container_name: str,
        partition: CosmosPartition,
        credential: Optional[Any] = None,
    ) -> "CosmosOrderRepository":
        container = client.get_database_client(db_name).get_container_client(container_name)
        logger.info(
            f"Bound to Cosmos container {db_name}/{container_name} "
            f"(partition {partition.key}={partition.value})"
        )
        return cls(container, partition, client=client, credential=credential)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
        if self._credential is not None:
            await self._credential.close()
            self._credential = None
        logger.info("Cosmos DB connection closed")

    async def insert_orders(self, orders: Sequence[Order]) -> None:
        failed: List[str] = []
        duplicates = 0

        for order in orders:
            try:
                await self._container.create_item(body=self._to_item(order))
            except exceptions.CosmosResourceExistsError:
                duplicates += 1
            except exceptions.CosmosHttpResponseError as e:
                logger.error(f"Failed to insert order {order.order_id}: status={e.status_code}")
                failed.append(order.order_id)

        if duplicates:
            logger.info(f"Skipped {duplicates} duplicate order(s) already in the database")
        if failed:
            raise RepositoryError(f"Failed to insert {len(failed)} order(s): {failed}")

    async def get_pending_orders(self) -> List[Order]:
        try:
            items = self._container.query_items(
                query=PENDING_QUERY,
                parameters=[{"name": "@status", "value": int(OrderStatus.PENDING)}],
                partition_key=self._partition.value,
            )
            documents = [item async for item in items]
        except exceptions.CosmosHttpResponseError as e:
            raise RepositoryError(f"Failed to query pending orders: status={e.status_code}") from e

        return sort_by_order_id([self._to_order(document) for document in documents])

    async def get_order(self, order_id: str) -> Order:
        return self._to_order(await self._read_item(order_id))

    async def update_order(self, order: Order) -> None:
        stored = await self._read_item(order.order_id)

        item = self._strip(stored)
        item.update(self._to_item(order))

        try:
            await self._container.replace_item(item=order.order_id, body=item)
        except exceptions.CosmosResourceNotFoundError:
            raise OrderNotFoundError(order.order_id) from None
        except exceptions.CosmosHttpResponseError as e:
            raise RepositoryError(
                f"Failed to update order {order.order_id}: status={e.status_code}",
                order_id=order.order_id,
            ) from e

    async def _read_item(self, order_id: str) -> Dict[str, Any]:
        try:
            return await self._container.read_item(
                item=order_id, partition_key=self._partition.value
            )
        except exceptions.CosmosResourceNotFoundError:
            raise OrderNotFoundError(order_id) from None
        except exceptions.CosmosHttpResponseError as e:
            raise RepositoryError(
                f"Failed to get order {order_id}: status={e.status_code}", order_id=order_id
            ) from e

    def _to_item(self, order: Order) -> Dict[str, Any]:
        if self._partition.key in order.payload:
            logger.warning(
                f"Order {order.order_id} carries partition field '{self._partition.key}'; "
                f"replacing {order.payload[self._partition.key]!r} with {self._partition.value!r}"
            )
        item = order.to_document()
        item[ITEM_ID_FIELD] = order.order_id
        item[self._partition.key] = self._partition.value
        return item

    def _strip(self, item: Mapping[str, Any]) -> Dict[str, Any]:
        """Drop Cosmos bookkeeping and routing fields, leaving the order document."""
        hidden = set(SYSTEM_PROPERTIES) | {ITEM_ID_FIELD, self._partition.key}
        return {name: value for name, value in item.items() if name not in hidden}

    def _to_order(self, item: Mapping[str, Any]) -> Order:
        try:
            return Order.from_document(self._strip(item))
        except MalformedRequestError as e:
            raise RepositoryError(f"Stored order is unreadable: {e}", order_id=e.order_id) from e
