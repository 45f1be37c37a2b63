"""Order repository backends."""
from .memory_order_repository import InMemoryOrderRepository

__all__ = ["InMemoryOrderRepository"]
