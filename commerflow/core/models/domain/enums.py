"""Domain enums shared by entities and I/O models."""

from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """
    Role of an account.

    Only ``ADMIN`` accounts may manage the catalogue, change order status or
    read the admin dashboard.
    """

    USER = "USER"
    ADMIN = "ADMIN"


class OrderStatus(str, Enum):
    """Lifecycle state of an order."""

    PENDING = "PENDING"  # Created from the cart, stock already reserved.
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"  # Stock has been returned.


# Orders in these states count towards revenue.
REVENUE_STATUSES = (
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)
