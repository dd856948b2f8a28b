"""Domain-level enums and constants."""

from .enums import REVENUE_STATUSES, OrderStatus, UserRole

__all__ = ["OrderStatus", "REVENUE_STATUSES", "UserRole"]
