"""
Order entity models.

Orders snapshot the unit price of every line at checkout, so later catalogue
price changes never alter an existing order. Every status change appends an
``OrderHistory`` row.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from commerflow.core.models.domain.enums import OrderStatus

from ..base import Base, new_id, utc_now


class Order(Base, table=True):
    """A placed order.

    Table: orders
    """

    __tablename__ = "orders"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=36)
    total: float = Field(default=0.0, ge=0)
    status: OrderStatus = Field(default=OrderStatus.PENDING, index=True)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Order(id={self.id}, status={self.status}, total={self.total})"


class OrderItem(Base, table=True):
    """A product line of an order with its unit price at checkout.

    Table: order_items
    """

    __tablename__ = "order_items"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    order_id: str = Field(foreign_key="orders.id", index=True, max_length=36)
    product_id: str = Field(foreign_key="products.id", index=True, max_length=36)
    quantity: int = Field(ge=1)
    price: float = Field(ge=0, description="Unit price at checkout")

    def __repr__(self) -> str:
        return f"OrderItem(id={self.id}, product_id={self.product_id}, quantity={self.quantity})"


class OrderHistory(Base, table=True):
    """Append-only status timeline of an order.

    Table: order_history
    """

    __tablename__ = "order_history"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    order_id: str = Field(foreign_key="orders.id", index=True, max_length=36)
    status: OrderStatus
    note: Optional[str] = Field(default=None, max_length=500)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, index=True)

    def __repr__(self) -> str:
        return f"OrderHistory(order_id={self.order_id}, status={self.status})"
