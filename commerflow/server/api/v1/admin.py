"""
Admin Endpoints.

Dashboard, store-wide order and user listings, inventory and sales
analytics. Every route requires an administrator.
"""

from typing import Optional

from fastapi import APIRouter, Query

from commerflow.core.models.domain.enums import OrderStatus, UserRole
from commerflow.core.models.io import (
    AdminUserListResponse,
    AnalyticsResponse,
    DashboardResponse,
    InventoryResponse,
    OrderListResponse,
    SalesAnalyticsResponse,
)
from commerflow.server.core import constant
from commerflow.server.services import AdminService
from commerflow.server.services.deps import AdminUser, ReposDep

router = APIRouter()

PeriodQuery = Query(30, ge=1, le=365, description="Number of days to look back")


@router.get("/dashboard", response_model=DashboardResponse, summary="Dashboard")
async def dashboard(admin: AdminUser, repos: ReposDep) -> DashboardResponse:
    """
    Store overview.

    Totals, revenue over non-cancelled orders, orders per status, the newest
    orders, low-stock products, best sellers and the number of pending
    orders waiting for more than an hour.
    """
    return await AdminService(repos).dashboard()


@router.get("/orders", response_model=OrderListResponse, summary="List All Orders")
async def list_orders(
    admin: AdminUser,
    repos: ReposDep,
    page: int = Query(1, ge=1),
    limit: int = Query(constant.ADMIN_PAGE_SIZE, ge=1, le=constant.MAX_PAGE_SIZE),
    status: Optional[OrderStatus] = Query(None),
    search: Optional[str] = Query(None, max_length=100, description="Matches the customer's name or email"),
) -> OrderListResponse:
    return await AdminService(repos).list_orders(page, limit, status=status, search=search)


@router.get("/users", response_model=AdminUserListResponse, summary="List Users")
async def list_users(
    admin: AdminUser,
    repos: ReposDep,
    page: int = Query(1, ge=1),
    limit: int = Query(constant.ADMIN_PAGE_SIZE, ge=1, le=constant.MAX_PAGE_SIZE),
    search: Optional[str] = Query(None, max_length=100),
    role: Optional[UserRole] = Query(None),
) -> AdminUserListResponse:
    return await AdminService(repos).list_users(page, limit, search=search, role=role)


@router.get("/inventory", response_model=InventoryResponse, summary="Inventory Overview")
async def inventory(admin: AdminUser, repos: ReposDep) -> InventoryResponse:
    return await AdminService(repos).inventory()


@router.get("/analytics/sales", response_model=SalesAnalyticsResponse, summary="Sales Analytics")
async def sales_analytics(admin: AdminUser, repos: ReposDep, period: int = PeriodQuery) -> SalesAnalyticsResponse:
    return await AdminService(repos).sales_analytics(period)


@router.get("/analytics", response_model=AnalyticsResponse, summary="Analytics")
async def analytics(admin: AdminUser, repos: ReposDep, period: int = PeriodQuery) -> AnalyticsResponse:
    return await AdminService(repos).analytics(period)
