"""
Order repository.

Reads for orders, their lines and their status history, plus the aggregate
queries behind the admin dashboard and analytics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from commerflow.core.models.domain.enums import REVENUE_STATUSES, OrderStatus

from ..entities.categories import Category
from ..entities.orders import Order, OrderHistory, OrderItem
from ..entities.products import Product
from ..entities.users import User
from .base import BaseRepository, QueryBuilder


class OrderRepository(BaseRepository[Order]):
    """Repository for orders, order lines and order history."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Order)

    async def get_for_user(self, order_id: str, user_id: str) -> Optional[Order]:
        """An order, only when it belongs to the given user."""
        stmt = select(Order).where(Order.id == order_id, Order.user_id == user_id)
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def list_for_user(
        self, user_id: str, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[Order]:
        """A user's orders, newest first."""
        stmt = select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc(), Order.id)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        return list((await self.session.execute(stmt)).scalars().all())

    async def status_counts(self, user_id: Optional[str] = None) -> Dict[OrderStatus, int]:
        """Number of orders per status, for one user or for everybody."""
        stmt = select(Order.status, func.count(Order.id)).group_by(Order.status)
        if user_id is not None:
            stmt = stmt.where(Order.user_id == user_id)
        rows = (await self.session.execute(stmt)).all()
        return {OrderStatus(status): int(count) for status, count in rows}

    async def items_for_orders(self, order_ids: Sequence[str]) -> Dict[str, List[Tuple[OrderItem, Product]]]:
        """Order lines with their products, grouped by order id."""
        grouped: Dict[str, List[Tuple[OrderItem, Product]]] = {order_id: [] for order_id in order_ids}
        if not order_ids:
            return grouped
        stmt = (
            select(OrderItem, Product)
            .join(Product, Product.id == OrderItem.product_id)
            .where(OrderItem.order_id.in_(list(order_ids)))
            .order_by(OrderItem.id)
        )
        for item, product in (await self.session.execute(stmt)).all():
            grouped.setdefault(item.order_id, []).append((item, product))
        return grouped

    async def history(self, order_id: str) -> List[OrderHistory]:
        """Status history of an order, newest first."""
        stmt = (
            select(OrderHistory)
            .where(OrderHistory.order_id == order_id)
            .order_by(OrderHistory.created_at.desc(), OrderHistory.id)
        )
        return list((await self.session.execute(stmt)).scalars().all())

    async def latest_history(self, order_ids: Sequence[str]) -> Dict[str, OrderHistory]:
        """The newest history entry of each order."""
        if not order_ids:
            return {}
        stmt = (
            select(OrderHistory)
            .where(OrderHistory.order_id.in_(list(order_ids)))
            .order_by(OrderHistory.created_at.desc())
        )
        latest: Dict[str, OrderHistory] = {}
        for entry in (await self.session.execute(stmt)).scalars().all():
            latest.setdefault(entry.order_id, entry)
        return latest

    async def add_history(self, order_id: str, status: OrderStatus, note: Optional[str] = None) -> OrderHistory:
        """Append a history entry inside the current transaction."""
        return await self.add(OrderHistory(order_id=order_id, status=status, note=note))

    async def search(
        self,
        page: int = 1,
        limit: int = 20,
        status: Optional[OrderStatus] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Tuple[Order, User]], int]:
        """
        Page through every order, newest first, with the ordering user.

        Args:
            page: 1-based page number
            limit: Page size
            status: Restrict to one status
            search: Case-insensitive substring matched against the user's name or email

        Returns:
            ``([(order, user), ...], total)``
        """
        clauses = []
        if status is not None:
            clauses.append(Order.status == status)
        if search:
            clauses.append(QueryBuilder.contains_text(search, User.name, User.email))

        count_stmt = select(func.count(Order.id)).join(User, User.id == Order.user_id).where(*clauses)
        total = int((await self.session.execute(count_stmt)).scalar_one())

        stmt = (
            select(Order, User)
            .join(User, User.id == Order.user_id)
            .where(*clauses)
            .order_by(Order.created_at.desc(), Order.id)
        )
        size, offset = QueryBuilder.page_window(page, limit)
        stmt = QueryBuilder.apply_pagination(stmt, size, offset)
        return [(order, user) for order, user in (await self.session.execute(stmt)).all()], total

    async def recent_with_users(self, limit: int) -> List[Tuple[Order, User]]:
        stmt = (
            select(Order, User)
            .join(User, User.id == Order.user_id)
            .order_by(Order.created_at.desc(), Order.id)
            .limit(limit)
        )
        return [(order, user) for order, user in (await self.session.execute(stmt)).all()]

    async def revenue(self) -> Tuple[float, int]:
        """Sum of totals and number of orders over every non-cancelled order."""
        stmt = select(func.coalesce(func.sum(Order.total), 0.0), func.count(Order.id)).where(
            Order.status.in_(REVENUE_STATUSES)
        )
        total, count = (await self.session.execute(stmt)).one()
        return float(total), int(count)

    async def top_selling(self, limit: int) -> List[Tuple[Product, Category, int]]:
        """Products ranked by units sold across all orders."""
        sold = func.sum(OrderItem.quantity).label("total_sold")
        ranking = (
            select(OrderItem.product_id, sold)
            .group_by(OrderItem.product_id)
            .order_by(sold.desc())
            .limit(limit)
            .subquery()
        )
        stmt = (
            select(Product, Category, ranking.c.total_sold)
            .join(ranking, ranking.c.product_id == Product.id)
            .join(Category, Category.id == Product.category_id)
            .order_by(ranking.c.total_sold.desc(), Product.name)
        )
        rows = (await self.session.execute(stmt)).all()
        return [(product, category, int(total_sold)) for product, category, total_sold in rows]

    async def sales_since(self, since: datetime) -> List[Order]:
        """Non-cancelled orders placed at or after ``since``, oldest first."""
        stmt = (
            select(Order)
            .where(Order.created_at >= since, Order.status.in_(REVENUE_STATUSES))
            .order_by(Order.created_at.asc())
        )
        return list((await self.session.execute(stmt)).scalars().all())

    async def sale_lines(self, order_ids: Sequence[str]) -> List[Tuple[OrderItem, Product, Category]]:
        """Order lines of the given orders with product and category."""
        if not order_ids:
            return []
        stmt = (
            select(OrderItem, Product, Category)
            .join(Product, Product.id == OrderItem.product_id)
            .join(Category, Category.id == Product.category_id)
            .where(OrderItem.order_id.in_(list(order_ids)))
        )
        return [(item, product, category) for item, product, category in (await self.session.execute(stmt)).all()]

    async def pending_older_than(self, cutoff: datetime) -> List[Order]:
        """Pending orders created before ``cutoff``, oldest first."""
        stmt = (
            select(Order)
            .where(Order.status == OrderStatus.PENDING, Order.created_at < cutoff)
            .order_by(Order.created_at.asc())
        )
        return list((await self.session.execute(stmt)).scalars().all())
