"""
Order entity.

CRITICAL: This file must contain ZERO imports from:
- motor / pymongo
- azure
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from ..enums import OrderStatus
from ..exceptions import InvalidStatusTransitionError, MalformedRequestError
from ..value_objects import canonical_order_id

ORDER_ID_FIELD = "orderId"
STATUS_FIELD = "status"


def parse_status(raw: Any) -> OrderStatus:
    """Convert a serialized status (integer) into OrderStatus."""
    if isinstance(raw, OrderStatus):
        return raw
    # bool is an int subclass; true/false are never valid statuses
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise MalformedRequestError(f"Status must be an integer, got: {raw!r}")
    try:
        return OrderStatus(raw)
    except ValueError:
        raise MalformedRequestError(f"Unknown status: {raw}") from None


@dataclass
class Order:
    """
    A customer order moving through the makeline.

    Only ``order_id`` and ``status`` carry meaning here. Everything else the
    order was submitted with (customerId, items, timePlaced, ...) lives in
    ``payload`` and is passed through untouched.
    """
    order_id: str
    status: OrderStatus = OrderStatus.NEW
    payload: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.order_id = canonical_order_id(self.order_id)
        self.status = parse_status(self.status)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Order":
        """
        Build an Order from its serialized form.

        Raises:
            MalformedRequestError: If orderId is missing or invalid, or the
                status is not a known integer.
        """
        payload = dict(document)
        if ORDER_ID_FIELD not in payload:
            raise MalformedRequestError("Order is missing orderId")
        order_id = payload.pop(ORDER_ID_FIELD)
        status = payload.pop(STATUS_FIELD, OrderStatus.NEW)
        return cls(order_id=order_id, status=status, payload=payload)

    @classmethod
    def from_intake(cls, document: Mapping[str, Any]) -> "Order":
        """
        Build a newly placed Order from a queue message.

        Whatever status the message carries is discarded and the order
        starts as Pending; only orderId has to be valid.

        Raises:
            MalformedRequestError: If orderId is missing or invalid.
        """
        payload = dict(document)
        payload.pop(STATUS_FIELD, None)
        if ORDER_ID_FIELD not in payload:
            raise MalformedRequestError("Order is missing orderId")
        order_id = payload.pop(ORDER_ID_FIELD)
        return cls(order_id=order_id, status=OrderStatus.PENDING, payload=payload)

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the stored / wire shape: {orderId, status, ...payload}."""
        document = dict(self.payload)
        document[ORDER_ID_FIELD] = self.order_id
        document[STATUS_FIELD] = int(self.status)
        return document

    def mark_pending(self) -> None:
        """Intake transition. Overwrites whatever status the message carried."""
        self.status = OrderStatus.PENDING

    def advance_to(self, new_status: OrderStatus) -> None:
        """
        Business rule: move to the next pipeline stage.

        Re-applying the current status is allowed so repeated updates stay
        idempotent. Moving backward or skipping a stage is rejected.
        """
        if new_status == self.status:
            return
        if self.status < OrderStatus.PENDING or new_status != self.status + 1:
            raise InvalidStatusTransitionError(
                f"Cannot move order {self.order_id} from "
                f"{self.status.name} to {new_status.name}",
                order_id=self.order_id,
            )
        self.status = new_status
