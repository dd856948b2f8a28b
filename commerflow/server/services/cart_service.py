"""
Service for the caller's shopping cart.

Carts are created lazily on first access. Stock is checked against the
resulting line quantity whenever a line is added or changed; stock is only
reserved at checkout.
"""

from __future__ import annotations

from typing import Tuple

from commerflow.core.database import SqlRepoBundle
from commerflow.core.database.entities.carts import Cart, CartItem
from commerflow.core.errors import NotFoundError, ValidationError
from commerflow.core.logging_config import get_logger
from commerflow.core.models.io import CartItemRead, CartRead, ProductRead

logger = get_logger(__name__)


class CartService:
    """Operations on one user's cart."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos

    async def get_cart(self, user_id: str) -> CartRead:
        """Return the user's cart with every line and the running total."""
        cart = await self.repos.carts.get_or_create(user_id)
        return await self._read_cart(cart)

    async def _read_cart(self, cart: Cart) -> CartRead:
        lines = await self.repos.carts.items_with_products(cart.id)
        items = [self._read_item(item, product, category) for item, product, category in lines]
        return CartRead(
            id=cart.id,
            user_id=cart.user_id,
            items=items,
            total=round(sum(item.subtotal for item in items), 2),
            item_count=sum(item.quantity for item in items),
            created_at=cart.created_at,
            updated_at=cart.updated_at,
        )

    @staticmethod
    def _read_item(item: CartItem, product, category=None) -> CartItemRead:
        return CartItemRead(
            id=item.id,
            cart_id=item.cart_id,
            product_id=item.product_id,
            quantity=item.quantity,
            product=ProductRead.from_entity(product, category),
            subtotal=round(product.price * item.quantity, 2),
            created_at=item.created_at,
            updated_at=item.updated_at,
        )

    async def add_item(self, user_id: str, product_id: str, quantity: int) -> Tuple[CartItemRead, bool]:
        """
        Add a product to the cart, merging with an existing line for the same product.

        Returns:
            ``(line, created)`` where ``created`` is False when quantities were merged

        Raises:
            NotFoundError: If the product does not exist
            ValidationError: If the resulting quantity exceeds the available stock
        """
        found = await self.repos.products.get_with_category(product_id)
        if found is None:
            raise NotFoundError("Product not found")
        product, category = found

        cart = await self.repos.carts.get_or_create(user_id)
        item = await self.repos.carts.find_item(cart.id, product_id)
        wanted = quantity + (item.quantity if item else 0)
        if wanted > product.stock:
            raise ValidationError("Insufficient stock", details={"available": product.stock, "requested": wanted})

        if item is not None:
            item.quantity = wanted
            item = await self.repos.carts.update(item)
            created = False
        else:
            item = await self.repos.carts.create(CartItem(cart_id=cart.id, product_id=product_id, quantity=quantity))
            created = True
        logger.debug(f"Cart {cart.id}: product {product_id} quantity now {item.quantity}")
        return self._read_item(item, product, category), created

    async def update_item(self, user_id: str, item_id: str, quantity: int) -> CartItemRead:
        """
        Set the quantity of one of the caller's cart lines.

        Raises:
            NotFoundError: If the line does not exist in the caller's cart
            ValidationError: If the quantity exceeds the available stock
        """
        item = await self.repos.carts.get_item_for_user(item_id, user_id)
        if item is None:
            raise NotFoundError("Cart item not found")
        product, category = await self.repos.products.get_with_category(item.product_id)
        if quantity > product.stock:
            raise ValidationError("Insufficient stock", details={"available": product.stock, "requested": quantity})
        item.quantity = quantity
        item = await self.repos.carts.update(item)
        return self._read_item(item, product, category)

    async def remove_item(self, user_id: str, item_id: str) -> None:
        item = await self.repos.carts.get_item_for_user(item_id, user_id)
        if item is None:
            raise NotFoundError("Cart item not found")
        await self.repos.carts.remove(item)
        await self.repos.carts.session.commit()

    async def clear(self, user_id: str) -> int:
        """Empty the caller's cart; returns the number of lines removed."""
        cart = await self.repos.carts.get_by_user(user_id)
        if cart is None:
            return 0
        removed = await self.repos.carts.clear(cart.id)
        await self.repos.carts.session.commit()
        return removed
