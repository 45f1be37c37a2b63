"""
MongoDB Order Repository Implementation.

Implements OrderRepository over a single MongoDB collection using Motor.
Documents are addressed by orderId only; a unique index on that field turns
queue redelivery into duplicate-key errors, which are ignored on insert.
"""
from typing import Any, List, Mapping, Optional, Sequence
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import BulkWriteError, PyMongoError

from core.domain.entities.order import ORDER_ID_FIELD, STATUS_FIELD, Order
from core.domain.enums import OrderStatus
from core.domain.exceptions import MalformedRequestError, OrderNotFoundError, RepositoryError
from core.domain.repositories.order_repository import OrderRepository, sort_by_order_id


logger = logging.getLogger(__name__)

DUPLICATE_KEY_ERROR = 11000

# Never hand Mongo's internal _id back to callers.
PROJECTION = {"_id": 0}


class MongoOrderRepository(OrderRepository):
    """
    MongoDB implementation of OrderRepository.

    Holds one collection handle for the lifetime of the process; no
    per-request state.
    """

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        client: Optional[AsyncIOMotorClient] = None,
    ):
        """
        Initialize repository with a collection handle.

        Args:
            collection: Motor collection holding order documents
            client: Owning client, closed by close() when given
        """
        self._collection = collection
        self._client = client

    @classmethod
    def connect(
        cls,
        uri: str,
        db_name: str,
        collection_name: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> "MongoOrderRepository":
        """
        Create a client and bind the repository to its collection.

        Credentials are optional; when a username is given it is passed
        alongside the URI rather than embedded in it.
        """
        client_kwargs = {}
        if username:
            client_kwargs["username"] = username
            client_kwargs["password"] = password

        client = AsyncIOMotorClient(uri, **client_kwargs)
        collection = client[db_name][collection_name]
        logger.info(f"Connected to MongoDB collection {db_name}.{collection_name}")
        return cls(collection, client=client)

    async def ensure_indexes(self) -> None:
        """Create the unique orderId index that backs idempotent inserts."""
        try:
            await self._collection.create_index(ORDER_ID_FIELD, unique=True)
        except PyMongoError as e:
            raise RepositoryError(f"Failed to create orderId index: {e}") from e

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("MongoDB connection closed")

    async def insert_orders(self, orders: Sequence[Order]) -> None:
        if not orders:
            return

        documents = [order.to_document() for order in orders]
        try:
            # Unordered: one failing document does not stop the rest.
            await self._collection.insert_many(documents, ordered=False)
        except BulkWriteError as e:
            details = e.details or {}
            write_errors = details.get("writeErrors", [])
            failures = [err for err in write_errors if err.get("code") != DUPLICATE_KEY_ERROR]
            duplicates = len(write_errors) - len(failures)
            if duplicates:
                logger.info(f"Skipped {duplicates} duplicate order(s) already in the database")
            if failures or details.get("writeConcernErrors"):
                failed_ids = [documents[err["index"]][ORDER_ID_FIELD] for err in failures if "index" in err]
                raise RepositoryError(
                    f"Failed to insert {len(failures)} order(s): {failed_ids}"
                ) from e
        except PyMongoError as e:
            raise RepositoryError(f"Failed to insert orders: {e}") from e

    async def get_pending_orders(self) -> List[Order]:
        try:
            cursor = self._collection.find({STATUS_FIELD: int(OrderStatus.PENDING)}, PROJECTION)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise RepositoryError(f"Failed to query pending orders: {e}") from e

        return sort_by_order_id([self._to_order(document) for document in documents])

    async def get_order(self, order_id: str) -> Order:
        try:
            document = await self._collection.find_one({ORDER_ID_FIELD: order_id}, PROJECTION)
        except PyMongoError as e:
            raise RepositoryError(f"Failed to get order {order_id}: {e}", order_id=order_id) from e

        if document is None:
            raise OrderNotFoundError(order_id)
        return self._to_order(document)

    async def update_order(self, order: Order) -> None:
        try:
            result = await self._collection.update_one(
                {ORDER_ID_FIELD: order.order_id},
                {"$set": order.to_document()},
            )
        except PyMongoError as e:
            raise RepositoryError(
                f"Failed to update order {order.order_id}: {e}", order_id=order.order_id
            ) from e

        if result.matched_count == 0:
            raise OrderNotFoundError(order.order_id)

    @staticmethod
    def _to_order(document: Mapping[str, Any]) -> Order:
        try:
            return Order.from_document(document)
        except MalformedRequestError as e:
            raise RepositoryError(f"Stored order is unreadable: {e}", order_id=e.order_id) from e
