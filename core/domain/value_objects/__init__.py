"""Domain value objects."""

from .order_id import INT64_MAX, canonical_order_id

__all__ = ["INT64_MAX", "canonical_order_id"]
