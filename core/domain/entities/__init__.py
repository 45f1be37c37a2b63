"""Domain entities."""
from .order import Order, parse_status, ORDER_ID_FIELD, STATUS_FIELD

__all__ = ["Order", "parse_status", "ORDER_ID_FIELD", "STATUS_FIELD"]
