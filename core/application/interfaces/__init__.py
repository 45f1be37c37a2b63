"""Application layer interfaces."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence

from core.domain.entities import Order


@dataclass
class QueuedOrder:
    """An order pulled from the queue, with the handle needed to acknowledge it."""
    message_id: str
    order: Order


class OrderQueue(ABC):
    """
    Interface for the incoming order queue.

    Delivery is at-least-once: a message that is received but never
    acknowledged comes back on a later poll.
    """

    @abstractmethod
    async def receive_orders(self) -> List[QueuedOrder]:
        """
        Poll once for the orders currently visible on the queue.

        Never blocks waiting for new messages; an empty list means nothing
        is queued right now.

        Raises:
            QueueError: If the queue cannot be read
        """
        pass

    @abstractmethod
    async def acknowledge(self, messages: Sequence[QueuedOrder]) -> None:
        """
        Mark messages as processed so they are not delivered again.

        Raises:
            QueueError: If the acknowledgement fails
        """
        pass
