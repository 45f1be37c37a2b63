"""
Order endpoints.

Errors raised by the service are mapped to status codes by the exception
handlers registered in api.main, so the handlers here only cover the happy
path.
"""
from typing import Any, Dict, List
import logging

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_order_service
from core.application.dtos.order_dto import OrderUpdateRequest
from core.application.services.order_service import OrderService


logger = logging.getLogger(__name__)
router = APIRouter()


# =============================================================================
# FETCH (INTAKE) - must be registered before /order/{order_id}
# =============================================================================

@router.get(
    "/order/fetch",
    status_code=status.HTTP_200_OK,
    summary="Drain the queue and list pending orders",
)
async def fetch_orders(
    service: OrderService = Depends(get_order_service),
) -> List[Dict[str, Any]]:
    """
    Pull newly queued orders into the store as Pending, then return every
    order that is still pending.
    """
    orders = await service.fetch_orders()
    return [order.to_document() for order in orders]


# =============================================================================
# GET ORDER BY ID
# =============================================================================

@router.get(
    "/order/{order_id}",
    status_code=status.HTTP_200_OK,
    summary="Get order by ID",
)
async def get_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
) -> Dict[str, Any]:
    """
    **Parameters:**
    - `order_id`: integer order id; leading zeros are ignored
    """
    order = await service.get_order(order_id)
    return order.to_document()


# =============================================================================
# UPDATE ORDER STATUS
# =============================================================================

@router.put(
    "/order",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Advance order status",
    response_class=Response,
)
async def update_order(
    request: OrderUpdateRequest,
    service: OrderService = Depends(get_order_service),
) -> Response:
    """
    Move an order to Processing (2) or Complete (3).

    Any other fields in the body are stored with the order.
    """
    await service.update_order(request)
    return Response(status_code=status.HTTP_202_ACCEPTED)
