# Settings modules
from .app_settings import AppSettings, get_app_settings
from .order_db_settings import COSMOS_SQL_API, MEMORY_API, OrderDbSettings
from .order_queue_settings import OrderQueueSettings
from .service_settings import ServiceSettings

__all__ = [
    "AppSettings",
    "get_app_settings",
    "COSMOS_SQL_API",
    "MEMORY_API",
    "OrderDbSettings",
    "OrderQueueSettings",
    "ServiceSettings",
]
