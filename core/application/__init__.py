"""Application layer - services, interfaces, and DTOs."""

from .dtos import OrderUpdateRequest
from .interfaces import OrderQueue, QueuedOrder
from .services import OrderService

__all__ = [
    # DTOs
    "OrderUpdateRequest",
    # Services
    "OrderService",
    # Interfaces
    "OrderQueue",
    "QueuedOrder",
]
