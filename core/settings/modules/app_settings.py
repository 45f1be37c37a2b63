from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from core.settings.modules.order_db_settings import OrderDbSettings
from core.settings.modules.order_queue_settings import OrderQueueSettings
from core.settings.modules.service_settings import ServiceSettings


class AppSettings(BaseModel):
    """Application settings aggregator."""

    model_config = ConfigDict(extra="ignore")

    db: OrderDbSettings
    queue: OrderQueueSettings
    service: ServiceSettings


@lru_cache()
def get_app_settings() -> AppSettings:
    """Return cached global settings for the entire app."""
    return AppSettings(
        db=OrderDbSettings(),
        queue=OrderQueueSettings(),
        service=ServiceSettings(),
    )
