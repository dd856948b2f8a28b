"""
Category repository.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.categories import Category
from ..entities.products import Product
from .base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for product categories."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Category)

    async def find_by_name(self, name: str, exclude_id: Optional[str] = None) -> Optional[Category]:
        """Find a category whose name matches ignoring case, optionally skipping one id."""
        stmt = select(Category).where(func.lower(Category.name) == name.strip().lower())
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def list_with_product_counts(self) -> List[Tuple[Category, int]]:
        """All categories ordered by name, each with the number of products it holds."""
        stmt = (
            select(Category, func.count(Product.id))
            .outerjoin(Product, Product.category_id == Category.id)
            .group_by(Category.id)
            .order_by(Category.name)
        )
        result = await self.session.execute(stmt)
        return [(category, int(count)) for category, count in result.all()]

    async def product_count(self, category_id: str) -> int:
        stmt = select(func.count()).select_from(Product).where(Product.category_id == category_id)
        return int((await self.session.execute(stmt)).scalar_one())

    async def products_of(self, category_id: str) -> List[Product]:
        """Products of a category, newest first."""
        stmt = select(Product).where(Product.category_id == category_id).order_by(Product.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
