"""
Order Endpoints.

Customers place orders from their cart, read and cancel their own orders.
Administrators move orders through their lifecycle.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, status

from commerflow.core.models.io import OrderHistoryRead, OrderRead, OrderStatusUpdate
from commerflow.server.services import OrderService
from commerflow.server.services.deps import AdminUser, CurrentUser, ReposDep

router = APIRouter()


@router.get("", response_model=List[OrderRead], summary="List My Orders")
async def list_orders(user: CurrentUser, repos: ReposDep) -> List[OrderRead]:
    """The caller's orders, newest first, with lines and the latest history entry."""
    return await OrderService(repos).list_orders(user.id)


@router.get(
    "/{order_id}",
    response_model=OrderRead,
    summary="Get Order",
    responses={404: {"description": "Order not found"}},
)
async def get_order(order_id: UUID, user: CurrentUser, repos: ReposDep) -> OrderRead:
    return await OrderService(repos).get_order(str(order_id), user.id)


@router.get(
    "/{order_id}/history",
    response_model=List[OrderHistoryRead],
    summary="Get Order History",
    responses={404: {"description": "Order not found"}},
)
async def get_order_history(order_id: UUID, user: CurrentUser, repos: ReposDep) -> List[OrderHistoryRead]:
    return await OrderService(repos).get_history(str(order_id), user.id)


@router.post(
    "",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
    summary="Place Order",
    description="Create an order from the caller's cart, reserve stock and empty the cart.",
    responses={400: {"description": "Cart is empty or a product lacks stock"}},
)
async def create_order(user: CurrentUser, repos: ReposDep) -> OrderRead:
    return await OrderService(repos).create_from_cart(user.id)


@router.patch(
    "/{order_id}/status",
    response_model=OrderRead,
    summary="Update Order Status",
    responses={400: {"description": "Invalid status or order already cancelled"}, 404: {"description": "Order not found"}},
)
async def update_order_status(
    order_id: UUID, payload: OrderStatusUpdate, admin: AdminUser, repos: ReposDep
) -> OrderRead:
    """
    Move an order to a new status (admin only).

    - **status**: PENDING, PROCESSING, SHIPPED, DELIVERED or CANCELLED.
    - **note**: Optional note stored with the history entry.
    """
    return await OrderService(repos).update_status(str(order_id), payload.status, payload.note)


@router.post(
    "/{order_id}/cancel",
    response_model=OrderRead,
    summary="Cancel Order",
    responses={400: {"description": "Order is no longer pending"}, 404: {"description": "Order not found"}},
)
async def cancel_order(order_id: UUID, user: CurrentUser, repos: ReposDep) -> OrderRead:
    return await OrderService(repos).cancel(str(order_id), user.id)
