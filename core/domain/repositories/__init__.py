"""Repository interfaces."""
from .order_repository import OrderRepository, sort_by_order_id

__all__ = ["OrderRepository", "sort_by_order_id"]
