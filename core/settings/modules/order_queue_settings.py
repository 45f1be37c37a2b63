from __future__ import annotations

from pydantic import Field

from core.settings.base_settings import MakelineBaseSettings


class OrderQueueSettings(MakelineBaseSettings):
    """
    Settings for the Redis Stream that carries new orders.
    Loaded from .env with exact variable name matching.
    """

    uri: str = Field("redis://localhost:6379/0", alias="ORDER_QUEUE_URI")
    name: str = Field("orders", alias="ORDER_QUEUE_NAME")
    group: str = Field("makeline-service", alias="ORDER_QUEUE_GROUP")
    consumer: str = Field("makeline-service-1", alias="ORDER_QUEUE_CONSUMER")
    username: str = Field("", alias="ORDER_QUEUE_USERNAME")
    password: str = Field("", alias="ORDER_QUEUE_PASSWORD")
    batch_size: int = Field(100, gt=0, alias="ORDER_QUEUE_BATCH_SIZE")
