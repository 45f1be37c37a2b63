# Settings package
from core.settings.modules import (
    AppSettings,
    OrderDbSettings,
    OrderQueueSettings,
    ServiceSettings,
    get_app_settings,
)

__all__ = [
    "get_app_settings",
    "AppSettings",
    "OrderDbSettings",
    "OrderQueueSettings",
    "ServiceSettings",
]
