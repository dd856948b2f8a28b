"""
User repository.

Lookups by email are always performed on the lower-cased address, which is
also the form stored in the ``users`` table.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from commerflow.core.models.domain.enums import UserRole

from ..entities.orders import Order
from ..entities.users import User
from .base import BaseRepository, QueryBuilder


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Repository for user account data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email address (case-insensitive)."""
        stmt = select(User).where(User.email == normalize_email(email))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def email_taken(self, email: str, exclude_user_id: Optional[str] = None) -> bool:
        """Whether another account already uses this email address."""
        stmt = select(User.id).where(User.email == normalize_email(email))
        if exclude_user_id is not None:
            stmt = stmt.where(User.id != exclude_user_id)
        result = await self.session.execute(stmt.limit(1))
        return result.first() is not None

    def _search_clause(self, search: Optional[str], role: Optional[UserRole]):
        clauses = []
        if search:
            clauses.append(QueryBuilder.contains_text(search, User.name, User.email))
        if role is not None:
            clauses.append(User.role == role)
        return clauses

    async def search(
        self,
        page: int = 1,
        limit: int = 20,
        search: Optional[str] = None,
        role: Optional[UserRole] = None,
    ) -> Tuple[List[Tuple[User, int]], int]:
        """
        Page through users, newest first, with the number of orders each placed.

        Args:
            page: 1-based page number
            limit: Page size
            search: Case-insensitive substring matched against name or email
            role: Restrict to one role

        Returns:
            ``([(user, order_count), ...], total)``
        """
        clauses = self._search_clause(search, role)

        count_stmt = select(func.count()).select_from(User).where(*clauses)
        total = int((await self.session.execute(count_stmt)).scalar_one())

        order_counts = (
            select(Order.user_id, func.count(Order.id).label("order_count")).group_by(Order.user_id).subquery()
        )
        stmt = (
            select(User, func.coalesce(order_counts.c.order_count, 0))
            .outerjoin(order_counts, order_counts.c.user_id == User.id)
            .where(*clauses)
            .order_by(User.created_at.desc())
        )
        size, offset = QueryBuilder.page_window(page, limit)
        stmt = QueryBuilder.apply_pagination(stmt, size, offset)
        result = await self.session.execute(stmt)
        return [(user, int(count)) for user, count in result.all()], total

    async def registrations_since(self, since: datetime) -> List[datetime]:
        """Creation timestamps of every account registered at or after ``since``."""
        stmt = select(User.created_at).where(User.created_at >= since).order_by(User.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
