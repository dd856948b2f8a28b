"""
Product repository.

Besides CRUD this repository owns catalogue search and the guarded stock
updates used by checkout and cancellation.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..base import utc_now
from ..entities.categories import Category
from ..entities.orders import OrderItem
from ..entities.products import Product
from .base import BaseRepository, QueryBuilder

SORTABLE_COLUMNS = {
    "createdAt": Product.created_at,
    "name": Product.name,
    "price": Product.price,
    "stock": Product.stock,
}


class ProductRepository(BaseRepository[Product]):
    """Repository for catalogue products."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Product)

    async def search(
        self,
        page: int = 1,
        limit: int = 10,
        category_id: Optional[str] = None,
        search: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> Tuple[List[Tuple[Product, Category]], int]:
        """
        Filter, sort and page the catalogue.

        Args:
            page: 1-based page number
            limit: Page size
            category_id: Restrict to one category
            search: Case-insensitive substring matched against name or description
            min_price: Inclusive lower price bound
            max_price: Inclusive upper price bound
            sort_by: One of ``createdAt``, ``name``, ``price``, ``stock``
            sort_order: ``asc`` or ``desc``

        Returns:
            ``([(product, category), ...], total)``
        """
        clauses = []
        if category_id:
            clauses.append(Product.category_id == category_id)
        if search:
            clauses.append(QueryBuilder.contains_text(search, Product.name, Product.description))
        if min_price is not None:
            clauses.append(Product.price >= min_price)
        if max_price is not None:
            clauses.append(Product.price <= max_price)

        count_stmt = select(func.count()).select_from(Product).where(*clauses)
        total = int((await self.session.execute(count_stmt)).scalar_one())

        column = SORTABLE_COLUMNS.get(sort_by, Product.created_at)
        ordering = column.asc() if sort_order == "asc" else column.desc()
        stmt = (
            select(Product, Category)
            .join(Category, Category.id == Product.category_id)
            .where(*clauses)
            .order_by(ordering, Product.id)
        )
        size, offset = QueryBuilder.page_window(page, limit)
        stmt = QueryBuilder.apply_pagination(stmt, size, offset)
        result = await self.session.execute(stmt)
        return [(product, category) for product, category in result.all()], total

    async def get_with_category(self, product_id: str) -> Optional[Tuple[Product, Category]]:
        stmt = select(Product, Category).join(Category, Category.id == Product.category_id).where(
            Product.id == product_id
        )
        row = (await self.session.execute(stmt)).first()
        return (row[0], row[1]) if row else None

    async def get_by_name(self, name: str) -> Optional[Product]:
        result = await self.session.execute(select(Product).where(Product.name == name).limit(1))
        return result.scalar_one_or_none()

    async def low_stock(self, threshold: int) -> List[Tuple[Product, Category]]:
        """Products with fewer than ``threshold`` units, scarcest first."""
        stmt = (
            select(Product, Category)
            .join(Category, Category.id == Product.category_id)
            .where(Product.stock < threshold)
            .order_by(Product.stock.asc(), Product.name)
        )
        result = await self.session.execute(stmt)
        return [(product, category) for product, category in result.all()]

    async def out_of_stock(self) -> List[Tuple[Product, Category]]:
        stmt = (
            select(Product, Category)
            .join(Category, Category.id == Product.category_id)
            .where(Product.stock == 0)
            .order_by(Product.name)
        )
        result = await self.session.execute(stmt)
        return [(product, category) for product, category in result.all()]

    async def stock_stats(self) -> Dict[str, float]:
        """Total stock, average stock and number of products."""
        stmt = select(
            func.coalesce(func.sum(Product.stock), 0),
            func.coalesce(func.avg(Product.stock), 0),
            func.count(Product.id),
        )
        total, average, count = (await self.session.execute(stmt)).one()
        return {"total_stock": int(total), "average_stock": float(average), "total_products": int(count)}

    async def list_by_category(self) -> Dict[str, List[Product]]:
        """Every product grouped by category id."""
        result = await self.session.execute(select(Product).order_by(Product.name))
        grouped: Dict[str, List[Product]] = {}
        for product in result.scalars().all():
            grouped.setdefault(product.category_id, []).append(product)
        return grouped

    async def is_ordered(self, product_id: str) -> bool:
        """Whether any order line references the product."""
        stmt = select(OrderItem.id).where(OrderItem.product_id == product_id).limit(1)
        return (await self.session.execute(stmt)).first() is not None

    async def ordered_product_ids(self) -> List[str]:
        result = await self.session.execute(select(OrderItem.product_id).distinct())
        return list(result.scalars().all())

    async def decrement_stock(self, product_id: str, quantity: int) -> bool:
        """
        Take ``quantity`` units out of stock inside the current transaction.

        The update only applies while enough stock remains, so concurrent
        checkouts can never drive stock below zero.

        Returns:
            True when the stock was reduced, False when not enough was left.
        """
        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity, updated_at=utc_now())
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def increment_stock(self, product_id: str, quantity: int) -> None:
        """Put ``quantity`` units back into stock inside the current transaction."""
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(stock=Product.stock + quantity, updated_at=utc_now())
        )
        await self.session.execute(stmt)
