"""
Service behind the admin dashboard, listings, inventory and analytics.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import timedelta
from typing import Dict, List, Optional

from commerflow.core.database import SqlRepoBundle
from commerflow.core.database.base import utc_now
from commerflow.core.models.domain.enums import OrderStatus, UserRole
from commerflow.core.models.io import (
    AdminUserListResponse,
    AdminUserRead,
    AnalyticsResponse,
    DashboardResponse,
    InventoryResponse,
    OrderListResponse,
    ProductRead,
    SalesAnalyticsResponse,
    build_pagination,
)
from commerflow.core.models.io.admin import (
    CategorySales,
    CategoryStock,
    DailySales,
    DashboardOverview,
    DayRegistrations,
    DaySales,
    ProductSales,
    ProductStock,
    StatusCount,
    StockStats,
    TopSellingProduct,
)
from commerflow.server.core import constant

from .order_service import OrderService

RECENT_ORDERS = 10
TOP_SELLING = 5
TOP_CATEGORIES = 5
TOP_PRODUCTS = 10


class AdminService:
    """Read-only aggregates for administrators."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos
        self.orders = OrderService(repos)

    async def dashboard(self) -> DashboardResponse:
        revenue, revenue_orders = await self.repos.orders.revenue()
        overview = DashboardOverview(
            total_users=await self.repos.users.count(),
            total_products=await self.repos.products.count(),
            total_orders=await self.repos.orders.count(),
            total_categories=await self.repos.categories.count(),
            total_revenue=round(revenue, 2),
            total_revenue_orders=revenue_orders,
        )

        counts = await self.repos.orders.status_counts()
        by_status = [StatusCount(status=status, count=counts[status]) for status in OrderStatus if status in counts]

        recent = await self.repos.orders.recent_with_users(RECENT_ORDERS)
        recent_orders = await self.orders.build_reads(
            [order for order, _ in recent], users={user.id: user for _, user in recent}
        )

        low_stock = await self.repos.products.low_stock(constant.LOW_STOCK_THRESHOLD)
        top = await self.repos.orders.top_selling(TOP_SELLING)
        attention = await self.orders.get_orders_needing_attention()

        return DashboardResponse(
            overview=overview,
            orders_by_status=by_status,
            recent_orders=recent_orders,
            low_stock_products=[ProductRead.from_entity(product, category) for product, category in low_stock],
            top_selling_products=[
                TopSellingProduct(**ProductRead.from_entity(product, category).model_dump(), total_sold=sold)
                for product, category, sold in top
            ],
            orders_needing_attention=len(attention),
        )

    async def list_orders(
        self, page: int, limit: int, status: Optional[OrderStatus] = None, search: Optional[str] = None
    ) -> OrderListResponse:
        rows, total = await self.repos.orders.search(page=page, limit=limit, status=status, search=search)
        reads = await self.orders.build_reads([order for order, _ in rows], users={user.id: user for _, user in rows})
        return OrderListResponse(orders=reads, pagination=build_pagination(page, limit, total))

    async def list_users(
        self, page: int, limit: int, search: Optional[str] = None, role: Optional[UserRole] = None
    ) -> AdminUserListResponse:
        rows, total = await self.repos.users.search(page=page, limit=limit, search=search, role=role)
        users = []
        for user, count in rows:
            read = AdminUserRead.model_validate(user)
            read.order_count = count
            users.append(read)
        return AdminUserListResponse(users=users, pagination=build_pagination(page, limit, total))

    async def inventory(self) -> InventoryResponse:
        low_stock = await self.repos.products.low_stock(constant.LOW_STOCK_THRESHOLD)
        out_of_stock = await self.repos.products.out_of_stock()
        stats = await self.repos.products.stock_stats()
        grouped = await self.repos.products.list_by_category()
        categories = await self.repos.categories.list_with_product_counts()

        return InventoryResponse(
            low_stock_products=[ProductRead.from_entity(product, category) for product, category in low_stock],
            out_of_stock_products=[ProductRead.from_entity(product, category) for product, category in out_of_stock],
            stock_stats=StockStats(
                total_stock=stats["total_stock"],
                average_stock=round(stats["average_stock"], 2),
                total_products=stats["total_products"],
            ),
            products_by_category=[
                CategoryStock(
                    id=category.id,
                    name=category.name,
                    product_count=count,
                    products=[ProductStock.model_validate(product) for product in grouped.get(category.id, [])],
                )
                for category, count in categories
            ],
        )

    async def sales_analytics(self, period_days: int) -> SalesAnalyticsResponse:
        """Daily sales and best categories over the last ``period_days`` days."""
        orders = await self.repos.orders.sales_since(utc_now() - timedelta(days=period_days))
        lines = await self.repos.orders.sale_lines([order.id for order in orders])

        items_per_order: Dict[str, int] = defaultdict(int)
        category_totals: Dict[str, List[float]] = defaultdict(lambda: [0.0, 0])
        for item, _, category in lines:
            items_per_order[item.order_id] += item.quantity
            category_totals[category.name][0] += item.price * item.quantity
            category_totals[category.name][1] += item.quantity

        daily: Dict[str, List[float]] = {}
        for order in orders:
            day = daily.setdefault(order.created_at.date().isoformat(), [0.0, 0, 0])
            day[0] += order.total
            day[1] += 1
            day[2] += items_per_order[order.id]

        top_categories = sorted(category_totals.items(), key=lambda entry: entry[1][0], reverse=True)
        return SalesAnalyticsResponse(
            period=f"{period_days} days",
            total_sales=round(sum(order.total for order in orders), 2),
            total_orders=len(orders),
            total_items=sum(items_per_order.values()),
            daily_sales=[
                DailySales(date=date, total=round(total, 2), orders=count, items=items)
                for date, (total, count, items) in daily.items()
            ],
            top_categories=[
                CategorySales(category=name, total=round(total, 2), items=items)
                for name, (total, items) in top_categories[:TOP_CATEGORIES]
            ],
        )

    async def analytics(self, period_days: int) -> AnalyticsResponse:
        """Revenue, best products, daily sales and registrations over the last ``period_days`` days."""
        since = utc_now() - timedelta(days=period_days)
        orders = await self.repos.orders.sales_since(since)
        lines = await self.repos.orders.sale_lines([order.id for order in orders])

        total_sales = sum(order.total for order in orders)
        product_sales: Dict[str, float] = defaultdict(float)
        for item, product, _ in lines:
            product_sales[product.name] += item.price * item.quantity

        daily: Dict[str, List[float]] = {}
        for order in orders:
            day = daily.setdefault(order.created_at.date().isoformat(), [0.0, 0])
            day[0] += order.total
            day[1] += 1

        registrations: Dict[str, int] = defaultdict(int)
        for created_at in await self.repos.users.registrations_since(since):
            registrations[created_at.date().isoformat()] += 1

        top_products = sorted(product_sales.items(), key=lambda entry: entry[1], reverse=True)[:TOP_PRODUCTS]
        return AnalyticsResponse(
            total_sales=round(total_sales, 2),
            total_orders=len(orders),
            average_order_value=round(total_sales / len(orders), 2) if orders else 0.0,
            top_products=[ProductSales(name=name, sales=round(sales, 2)) for name, sales in top_products],
            sales_by_day=[
                DaySales(date=date, sales=round(total, 2), orders=count) for date, (total, count) in sorted(daily.items())
            ],
            user_registrations_by_day=[
                DayRegistrations(date=date, users=count) for date, count in sorted(registrations.items())
            ],
        )
