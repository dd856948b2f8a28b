"""
Business services used by the API routers.

Each service wraps a ``SqlRepoBundle`` bound to the request's session.
"""

from .admin_service import AdminService
from .cart_service import CartService
from .order_service import OrderService

__all__ = ["AdminService", "CartService", "OrderService"]
