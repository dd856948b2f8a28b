"""
Shopping cart repository.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.carts import Cart, CartItem
from ..entities.categories import Category
from ..entities.products import Product
from .base import BaseRepository


class CartRepository(BaseRepository[Cart]):
    """Repository for carts and their lines."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Cart)

    async def get_by_user(self, user_id: str) -> Optional[Cart]:
        result = await self.session.execute(select(Cart).where(Cart.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_or_create(self, user_id: str) -> Cart:
        """Return the user's cart, creating an empty one on first access."""
        cart = await self.get_by_user(user_id)
        if cart is None:
            cart = await self.create(Cart(user_id=user_id))
        return cart

    async def items_with_products(self, cart_id: str) -> List[Tuple[CartItem, Product, Category]]:
        """Cart lines in insertion order, each with its product and category."""
        stmt = (
            select(CartItem, Product, Category)
            .join(Product, Product.id == CartItem.product_id)
            .join(Category, Category.id == Product.category_id)
            .where(CartItem.cart_id == cart_id)
            .order_by(CartItem.created_at, CartItem.id)
        )
        result = await self.session.execute(stmt)
        return [(item, product, category) for item, product, category in result.all()]

    async def find_item(self, cart_id: str, product_id: str) -> Optional[CartItem]:
        stmt = select(CartItem).where(CartItem.cart_id == cart_id, CartItem.product_id == product_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_item_for_user(self, item_id: str, user_id: str) -> Optional[CartItem]:
        """A cart line, only when it belongs to the given user's cart."""
        stmt = (
            select(CartItem)
            .join(Cart, Cart.id == CartItem.cart_id)
            .where(CartItem.id == item_id, Cart.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def clear(self, cart_id: str) -> int:
        """Remove every line of a cart inside the current transaction; returns the number removed."""
        result = await self.session.execute(delete(CartItem).where(CartItem.cart_id == cart_id))
        return result.rowcount or 0

    async def delete_items_for_product(self, product_id: str) -> int:
        result = await self.session.execute(delete(CartItem).where(CartItem.product_id == product_id))
        return result.rowcount or 0
