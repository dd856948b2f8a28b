"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts. All of them are
serialised with camelCase field names.

Modules:
- common: camelCase base model, pagination, UUID strings
- users: registration, login, profile
- products / categories: catalogue
- carts: shopping cart
- orders: orders, order lines and status history
- admin: dashboard, inventory and analytics
"""

from .admin import (
    AdminUserListResponse,
    AdminUserRead,
    AnalyticsResponse,
    DashboardResponse,
    InventoryResponse,
    SalesAnalyticsResponse,
)
from .carts import CartItemCreate, CartItemRead, CartItemUpdate, CartRead
from .categories import CategoryCreate, CategoryDetail, CategoryRead, CategoryUpdate, CategoryWithCount
from .common import CamelModel, Pagination, UUIDStr, build_pagination
from .orders import (
    OrderHistoryRead,
    OrderItemRead,
    OrderListResponse,
    OrderRead,
    OrderStats,
    OrderStatusUpdate,
    UserOrdersResponse,
)
from .products import (
    CategorySummary,
    ProductCreate,
    ProductListResponse,
    ProductRead,
    ProductSummary,
    ProductUpdate,
)
from .users import AuthResponse, UserLogin, UserRead, UserRegister, UserSummary, UserUpdate

__all__ = [
    "AdminUserListResponse",
    "AdminUserRead",
    "AnalyticsResponse",
    "AuthResponse",
    "CamelModel",
    "CartItemCreate",
    "CartItemRead",
    "CartItemUpdate",
    "CartRead",
    "CategoryCreate",
    "CategoryDetail",
    "CategoryRead",
    "CategorySummary",
    "CategoryUpdate",
    "CategoryWithCount",
    "DashboardResponse",
    "InventoryResponse",
    "OrderHistoryRead",
    "OrderItemRead",
    "OrderListResponse",
    "OrderRead",
    "OrderStats",
    "OrderStatusUpdate",
    "Pagination",
    "ProductCreate",
    "ProductListResponse",
    "ProductRead",
    "ProductSummary",
    "ProductUpdate",
    "SalesAnalyticsResponse",
    "UUIDStr",
    "UserLogin",
    "UserOrdersResponse",
    "UserRead",
    "UserRegister",
    "UserSummary",
    "UserUpdate",
    "build_pagination",
]
