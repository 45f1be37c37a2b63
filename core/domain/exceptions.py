"""
Domain and application errors.

Every error raised by the order pipeline derives from OrderServiceError so the
HTTP layer can map the whole family to status codes in one place.
"""
from typing import Optional


class OrderServiceError(Exception):
    """Base class for order pipeline errors."""

    def __init__(self, message: str, order_id: Optional[str] = None):
        super().__init__(message)
        self.order_id = order_id


class MalformedRequestError(OrderServiceError):
    """Request is invalid (bad id format, disallowed status, missing field)."""


class OrderNotFoundError(OrderServiceError):
    """No order exists for the requested id."""

    def __init__(self, order_id: str):
        super().__init__(f"Order not found: {order_id}", order_id=order_id)


class InvalidStatusTransitionError(OrderServiceError):
    """Requested status would move the order backward or skip a stage."""


class RepositoryError(OrderServiceError):
    """Storage backend failed (connectivity, serialization, constraint)."""


class OperationTimeoutError(OrderServiceError):
    """A storage or queue call did not finish within the request timeout."""


class QueueError(OrderServiceError):
    """Polling or acknowledging the order queue failed."""


class ConfigurationError(Exception):
    """Required configuration is missing or invalid."""
