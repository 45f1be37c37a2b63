"""Domain enumerations."""
from .order_status import OrderStatus, USER_SETTABLE_STATUSES

__all__ = ["OrderStatus", "USER_SETTABLE_STATUSES"]
