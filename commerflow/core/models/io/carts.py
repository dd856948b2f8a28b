"""
Shopping cart I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import Field

from .common import CamelModel, UUIDStr
from .products import ProductRead


class CartItemCreate(CamelModel):
    product_id: UUIDStr
    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(CamelModel):
    quantity: int = Field(ge=1)


class CartItemRead(CamelModel):
    id: str
    cart_id: str
    product_id: str
    quantity: int
    product: ProductRead
    subtotal: float
    created_at: datetime
    updated_at: datetime


class CartRead(CamelModel):
    """A cart with its lines and the current total at catalogue prices."""

    id: str
    user_id: str
    items: List[CartItemRead] = Field(default_factory=list)
    total: float = 0.0
    item_count: int = 0
    created_at: datetime
    updated_at: datetime
