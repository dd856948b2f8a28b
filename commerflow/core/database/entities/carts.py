"""
Shopping cart entity models.

Every user owns at most one cart; a product appears at most once per cart and
repeated additions increase the quantity of the existing line.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Cart(Base, table=True):
    """A user's shopping cart.

    Table: carts
    """

    __tablename__ = "carts"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", unique=True, index=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Cart(id={self.id}, user_id={self.user_id})"


class CartItem(Base, table=True):
    """A product line inside a cart.

    Table: cart_items
    """

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_items_cart_product"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    cart_id: str = Field(foreign_key="carts.id", index=True, max_length=36)
    product_id: str = Field(foreign_key="products.id", index=True, max_length=36)
    quantity: int = Field(default=1, ge=1)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"CartItem(id={self.id}, product_id={self.product_id}, quantity={self.quantity})"
