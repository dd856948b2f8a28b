"""
Order I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from commerflow.core.models.domain.enums import OrderStatus

from .common import CamelModel, Pagination
from .products import ProductSummary
from .users import UserSummary


class OrderStatusUpdate(CamelModel):
    status: OrderStatus
    note: Optional[str] = Field(default=None, max_length=500)


class OrderItemRead(CamelModel):
    """An order line; ``price`` is the unit price paid at checkout."""

    id: str
    order_id: str
    product_id: str
    quantity: int
    price: float
    product: Optional[ProductSummary] = None


class OrderHistoryRead(CamelModel):
    id: str
    order_id: str
    status: OrderStatus
    note: Optional[str] = None
    created_at: datetime


class OrderRead(CamelModel):
    id: str
    user_id: str
    total: float
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemRead] = Field(default_factory=list)
    history: List[OrderHistoryRead] = Field(default_factory=list)
    user: Optional[UserSummary] = None


class OrderStats(CamelModel):
    total: int = 0
    pending: int = 0
    processing: int = 0
    shipped: int = 0
    delivered: int = 0
    cancelled: int = 0


class UserOrdersResponse(CamelModel):
    orders: List[OrderRead]
    pagination: Pagination
    stats: OrderStats


class OrderListResponse(CamelModel):
    orders: List[OrderRead]
    pagination: Pagination
