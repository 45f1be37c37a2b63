"""Application DTOs."""
from .order_dto import OrderUpdateRequest

__all__ = ["OrderUpdateRequest"]
