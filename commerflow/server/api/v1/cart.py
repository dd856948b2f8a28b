"""
Cart Endpoints.

All routes act on the authenticated caller's own cart. Cart lines of other
users are reported as not found.
"""

from uuid import UUID

from fastapi import APIRouter, Response, status

from commerflow.core.models.io import CartItemCreate, CartItemRead, CartItemUpdate, CartRead
from commerflow.server.services import CartService
from commerflow.server.services.deps import CurrentUser, ReposDep

router = APIRouter()


@router.get("", response_model=CartRead, summary="Get Cart")
async def get_cart(user: CurrentUser, repos: ReposDep) -> CartRead:
    """The caller's cart with its lines and total; created on first access."""
    return await CartService(repos).get_cart(user.id)


@router.post(
    "/items",
    response_model=CartItemRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Cart Item",
    responses={
        200: {"description": "Quantity merged into an existing line"},
        400: {"description": "Insufficient stock"},
        404: {"description": "Product not found"},
    },
)
async def add_item(payload: CartItemCreate, response: Response, user: CurrentUser, repos: ReposDep) -> CartItemRead:
    item, created = await CartService(repos).add_item(user.id, payload.product_id, payload.quantity)
    if not created:
        response.status_code = status.HTTP_200_OK
    return item


@router.put(
    "/items/{item_id}",
    response_model=CartItemRead,
    summary="Update Cart Item",
    responses={400: {"description": "Insufficient stock"}, 404: {"description": "Cart item not found"}},
)
async def update_item(item_id: UUID, payload: CartItemUpdate, user: CurrentUser, repos: ReposDep) -> CartItemRead:
    return await CartService(repos).update_item(user.id, str(item_id), payload.quantity)


@router.delete(
    "/items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Cart Item",
    responses={404: {"description": "Cart item not found"}},
)
async def remove_item(item_id: UUID, user: CurrentUser, repos: ReposDep) -> Response:
    await CartService(repos).remove_item(user.id, str(item_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Clear Cart")
async def clear_cart(user: CurrentUser, repos: ReposDep) -> Response:
    await CartService(repos).clear(user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
