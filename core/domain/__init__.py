"""Domain layer - pure domain models and interfaces."""

from .entities import Order
from .enums import OrderStatus
from .exceptions import (
    ConfigurationError,
    InvalidStatusTransitionError,
    MalformedRequestError,
    OperationTimeoutError,
    OrderNotFoundError,
    OrderServiceError,
    QueueError,
    RepositoryError,
)
from .repositories import OrderRepository
from .value_objects import canonical_order_id

__all__ = [
    "ConfigurationError",
    "InvalidStatusTransitionError",
    "MalformedRequestError",
    "OperationTimeoutError",
    "Order",
    "OrderNotFoundError",
    "OrderRepository",
    "OrderServiceError",
    "OrderStatus",
    "QueueError",
    "RepositoryError",
    "canonical_order_id",
]
