"""
Redis Streams Order Queue.

Reads newly placed orders from a Redis Stream through a consumer group.
Each stream entry carries the order JSON in its ``body`` field.

Delivery is at-least-once: entries are acknowledged only after the caller
has stored them, and every poll first re-reads this consumer's
unacknowledged entries before taking new ones.
"""
import json
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import redis.asyncio as aioredis
from redis.exceptions import RedisError, ResponseError

from core.application.interfaces import OrderQueue, QueuedOrder
from core.domain.entities.order import Order
from core.domain.exceptions import MalformedRequestError, QueueError


logger = logging.getLogger(__name__)

BODY_FIELD = "body"

# Stream ids for XREADGROUP: "0" replays this consumer's pending entries,
# ">" asks for entries never delivered to the group.
PENDING_ENTRIES = "0"
NEW_ENTRIES = ">"

StreamEntry = Tuple[str, Optional[Dict[str, Any]]]


class RedisStreamOrderQueue(OrderQueue):
    """
    Order queue backed by a Redis Stream consumer group.

    Stream: ORDER_QUEUE_NAME (default "orders")
    Consumer Group: ORDER_QUEUE_GROUP (default "makeline-service")
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        stream_name: str = "orders",
        consumer_group: str = "makeline-service",
        consumer_name: str = "makeline-service-1",
        batch_size: int = 100,
        username: Optional[str] = None,
        password: Optional[str] = None,
        client: Optional[aioredis.Redis] = None,
    ):
        """
        Initialize Redis Stream order queue.

        Args:
            redis_url: Redis connection URL
            stream_name: Redis Stream name
            consumer_group: Consumer group name
            consumer_name: Unique consumer name within the group
            batch_size: Maximum number of entries returned per poll
            username: Redis ACL username
            password: Redis ACL password
            client: Pre-built client (tests); connect() then only creates the group
        """
        self.redis_url = redis_url
        self.stream_name = stream_name
        self.consumer_group = consumer_group
        self.consumer_name = consumer_name
        self.batch_size = batch_size
        self._username = username or None
        self._password = password or None
        self._redis_client = client

    async def connect(self) -> None:
        """Establish Redis connection and create the consumer group."""
        try:
            if self._redis_client is None:
                self._redis_client = aioredis.from_url(
                    self.redis_url,
                    username=self._username,
                    password=self._password,
                    encoding="utf-8",
                    decode_responses=True,
                )
            await self._redis_client.ping()
            logger.info(f"✅ Connected to Redis stream {self.stream_name}")

            try:
                await self._redis_client.xgroup_create(
                    name=self.stream_name,
                    groupname=self.consumer_group,
                    id="0",
                    mkstream=True,
                )
                logger.info(f"Created consumer group: {self.consumer_group}")
            except ResponseError as e:
                if "BUSYGROUP" not in str(e):
                    raise
                logger.info(f"Consumer group {self.consumer_group} already exists")
        except RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise QueueError(f"Failed to connect to order queue: {e}") from e

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._redis_client is not None:
            await self._redis_client.aclose()
            self._redis_client = None
            logger.info("Disconnected from Redis")

    async def receive_orders(self) -> List[QueuedOrder]:
        client = await self._client()
        try:
            entries = await self._read(client, PENDING_ENTRIES, self.batch_size)
            remaining = self.batch_size - len(entries)
            if remaining > 0:
                entries += await self._read(client, NEW_ENTRIES, remaining)
        except RedisError as e:
            logger.error(f"Failed to read from order stream {self.stream_name}: {e}")
            raise QueueError(f"Failed to read from order queue: {e}") from e

        received: List[QueuedOrder] = []
        unreadable: List[str] = []
        for message_id, fields in entries:
            try:
                received.append(QueuedOrder(message_id=message_id, order=self._decode(fields)))
            except (MalformedRequestError, ValueError, KeyError, TypeError) as e:
                logger.warning(f"Dropping unreadable order message {message_id}: {e}")
                unreadable.append(message_id)

        if unreadable:
            await self._ack(client, unreadable)
        if received:
            logger.info(f"📨 Received {len(received)} order(s) from {self.stream_name}")
        return received

    async def acknowledge(self, messages: Sequence[QueuedOrder]) -> None:
        if not messages:
            return
        client = await self._client()
        await self._ack(client, [message.message_id for message in messages])

    async def _client(self) -> aioredis.Redis:
        if self._redis_client is None:
            await self.connect()
        return self._redis_client

    async def _read(self, client: aioredis.Redis, stream_id: str, count: int) -> List[StreamEntry]:
        # No block argument: XREADGROUP returns immediately with what is there.
        response = await client.xreadgroup(
            groupname=self.consumer_group,
            consumername=self.consumer_name,
            streams={self.stream_name: stream_id},
            count=count,
        )
        entries: List[StreamEntry] = []
        for _stream, stream_entries in response or []:
            entries.extend((message_id, fields) for message_id, fields in stream_entries)
        return entries

    async def _ack(self, client: aioredis.Redis, message_ids: List[str]) -> None:
        try:
            await client.xack(self.stream_name, self.consumer_group, *message_ids)
            logger.debug(f"Acknowledged {len(message_ids)} message(s)")
        except RedisError as e:
            logger.error(f"Failed to ACK messages {message_ids}: {e}")
            raise QueueError(f"Failed to acknowledge order messages: {e}") from e

    @staticmethod
    def _decode(fields: Optional[Dict[str, Any]]) -> Order:
        # Entries deleted from the stream come back from the pending list without fields.
        if not fields:
            raise ValueError("entry has no fields")
        data = json.loads(fields[BODY_FIELD])
        if not isinstance(data, dict):
            raise ValueError("order body is not a JSON object")
        return Order.from_intake(data)
