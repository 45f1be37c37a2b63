"""Order store lifecycle: pick the backend once and own its connection."""

from contextlib import asynccontextmanager
from typing import AsyncIterator
import logging

from core.domain.repositories import OrderRepository
from core.settings import OrderDbSettings


logger = logging.getLogger(__name__)


def create_order_repository(settings: OrderDbSettings) -> OrderRepository:
    """
    Build the repository selected by ORDER_DB_API.

    Raises:
        ConfigurationError: If a value the chosen backend needs is missing
    """
    if settings.is_memory:
        from core.infrastructure.adapters.persistence.memory_order_repository import (
            InMemoryOrderRepository,
        )

        logger.info("Using in-memory order store")
        return InMemoryOrderRepository()

    if settings.is_cosmos:
        from core.infrastructure.adapters.persistence.cosmos_order_repository import (
            CosmosOrderRepository,
            CosmosPartition,
        )

        logger.info("Using Azure CosmosDB SQL API")
        settings.require("uri", "name", "container_name", "partition_key", "partition_value")
        partition = CosmosPartition(key=settings.partition_key, value=settings.partition_value)
        if settings.use_workload_identity_auth:
            return CosmosOrderRepository.with_workload_identity(
                settings.uri, settings.name, settings.container_name, partition
            )
        return CosmosOrderRepository.with_key(
            settings.uri, settings.name, settings.container_name, settings.password, partition
        )

    from core.infrastructure.adapters.persistence.mongo_order_repository import (
        MongoOrderRepository,
    )

    logger.info("Using MongoDB API")
    settings.require("uri", "name", "collection_name")
    return MongoOrderRepository.connect(
        settings.uri,
        settings.name,
        settings.collection_name,
        username=settings.username,
        password=settings.password,
    )


@asynccontextmanager
async def open_order_repository(settings: OrderDbSettings) -> AsyncIterator[OrderRepository]:
    """
    Open the configured repository for the lifetime of the process.

    Runs backend setup (indexes) on entry and closes the client on exit.
    """
    repository = create_order_repository(settings)
    try:
        ensure_indexes = getattr(repository, "ensure_indexes", None)
        if ensure_indexes is not None:
            await ensure_indexes()
        yield repository
    finally:
        close = getattr(repository, "close", None)
        if close is not None:
            await close()
