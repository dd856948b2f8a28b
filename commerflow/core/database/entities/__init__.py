"""
Database entity models.

This package contains all database entity models organized by business domain
and table relationships. Each module represents either:

1. A single database table and its related logic
2. A business domain that spans multiple related tables

Modules:
- users: Customer and administrator accounts
- categories: Product categories
- products: Catalogue products
- carts: Shopping carts and their lines
- orders: Orders, order lines and status history
"""

from . import carts, categories, orders, products, users
from .carts import Cart, CartItem
from .categories import Category
from .orders import Order, OrderHistory, OrderItem
from .products import Product
from .users import User

__all__ = [
    "Cart",
    "CartItem",
    "Category",
    "Order",
    "OrderHistory",
    "OrderItem",
    "Product",
    "User",
    "carts",
    "categories",
    "orders",
    "products",
    "users",
]
