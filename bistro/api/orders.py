"""
Orders API router
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from bistro.api.deps import get_current_user, get_order_service, require_admin
from bistro.models import User
from bistro.schemas import (
    OrderCreate,
    OrderEnvelope,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
)
from bistro.services import OrderService

router = APIRouter(prefix="/api/orders", tags=["Orders"])


def _list_response(orders) -> OrderListResponse:
    return OrderListResponse(
        count=len(orders),
        data=[OrderResponse.model_validate(order) for order in orders],
    )


@router.post("", response_model=OrderEnvelope, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OrderCreate,
    user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
) -> OrderEnvelope:
    """Place an order; prices are taken from the menu at this moment."""
    order = await service.create_order(user, payload)
    return OrderEnvelope(
        message="Order placed successfully",
        data=OrderResponse.model_validate(order),
    )


@router.get("/my-orders", response_model=OrderListResponse)
async def list_my_orders(
    user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
) -> OrderListResponse:
    orders = await service.list_for_user(user)
    return _list_response(orders)


@router.get("", response_model=OrderListResponse)
async def list_all_orders(
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by order status"),
    admin: User = Depends(require_admin),
    service: OrderService = Depends(get_order_service),
) -> OrderListResponse:
    orders = await service.list_all(status=status_filter)
    return _list_response(orders)


@router.get("/{order_id}", response_model=OrderEnvelope)
async def get_order(
    order_id: int,
    user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
) -> OrderEnvelope:
    order = await service.get_order(user, order_id)
    return OrderEnvelope(data=OrderResponse.model_validate(order))


@router.patch("/{order_id}/status", response_model=OrderEnvelope)
async def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    admin: User = Depends(require_admin),
    service: OrderService = Depends(get_order_service),
) -> OrderEnvelope:
    order = await service.update_status(order_id, payload.status)
    return OrderEnvelope(
        message=f"Order status updated to {order.status.value}",
        data=OrderResponse.model_validate(order),
    )


@router.patch("/{order_id}/cancel", response_model=OrderEnvelope)
async def cancel_order(
    order_id: int,
    user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
) -> OrderEnvelope:
    order = await service.cancel_order(user, order_id)
    return OrderEnvelope(
        message="Order cancelled successfully",
        data=OrderResponse.model_validate(order),
    )
