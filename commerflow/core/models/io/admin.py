"""
Admin dashboard, inventory and analytics I/O models.
"""

from __future__ import annotations

from typing import List

from pydantic import Field

from commerflow.core.models.domain.enums import OrderStatus

from .common import CamelModel, Pagination
from .orders import OrderRead
from .products import ProductRead
from .users import UserRead


class DashboardOverview(CamelModel):
    total_users: int
    total_products: int
    total_orders: int
    total_categories: int
    total_revenue: float
    total_revenue_orders: int


class StatusCount(CamelModel):
    status: OrderStatus
    count: int


class TopSellingProduct(ProductRead):
    total_sold: int


class DashboardResponse(CamelModel):
    overview: DashboardOverview
    orders_by_status: List[StatusCount]
    recent_orders: List[OrderRead]
    low_stock_products: List[ProductRead]
    top_selling_products: List[TopSellingProduct]
    orders_needing_attention: int = 0


class AdminUserRead(UserRead):
    order_count: int = 0


class AdminUserListResponse(CamelModel):
    users: List[AdminUserRead]
    pagination: Pagination


class StockStats(CamelModel):
    total_stock: int
    average_stock: float
    total_products: int


class ProductStock(CamelModel):
    id: str
    name: str
    stock: int
    price: float


class CategoryStock(CamelModel):
    id: str
    name: str
    product_count: int
    products: List[ProductStock] = Field(default_factory=list)


class InventoryResponse(CamelModel):
    low_stock_products: List[ProductRead]
    out_of_stock_products: List[ProductRead]
    stock_stats: StockStats
    products_by_category: List[CategoryStock]


class DailySales(CamelModel):
    date: str
    total: float
    orders: int
    items: int


class CategorySales(CamelModel):
    category: str
    total: float
    items: int


class SalesAnalyticsResponse(CamelModel):
    period: str
    total_sales: float
    total_orders: int
    total_items: int
    daily_sales: List[DailySales]
    top_categories: List[CategorySales]


class ProductSales(CamelModel):
    name: str
    sales: float


class DaySales(CamelModel):
    date: str
    sales: float
    orders: int


class DayRegistrations(CamelModel):
    date: str
    users: int


class AnalyticsResponse(CamelModel):
    total_sales: float
    total_orders: int
    average_order_value: float
    top_products: List[ProductSales]
    sales_by_day: List[DaySales]
    user_registrations_by_day: List[DayRegistrations]
