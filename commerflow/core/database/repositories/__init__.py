"""
Repository layer for data access operations.

This package provides repository classes organized by business domain. Each
repository handles the data access for one aggregate and shares the session
it is constructed with.
"""

from .base import BaseRepository, QueryBuilder
from .carts import CartRepository
from .categories import CategoryRepository
from .orders import OrderRepository
from .products import ProductRepository
from .users import UserRepository, normalize_email

__all__ = [
    "BaseRepository",
    "CartRepository",
    "CategoryRepository",
    "OrderRepository",
    "ProductRepository",
    "QueryBuilder",
    "UserRepository",
    "normalize_email",
]
