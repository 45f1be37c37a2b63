"""
Order Status Enum.

Pipeline stages an order moves through, in order.
"""
from enum import IntEnum


class OrderStatus(IntEnum):
    """Order status values (integer-backed, ordered by pipeline stage)."""

    NEW = 0
    PENDING = 1
    PROCESSING = 2
    COMPLETE = 3


# Statuses a client is allowed to request through a status update.
USER_SETTABLE_STATUSES = frozenset({OrderStatus.PROCESSING, OrderStatus.COMPLETE})
