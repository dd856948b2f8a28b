"""
User entity models.

This module contains the database entity for customer and administrator
accounts. Passwords are only ever stored as bcrypt hashes.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field

from commerflow.core.models.domain.enums import UserRole

from ..base import Base, new_id, utc_now


class UserBase(Base):
    """Base fields for user accounts."""

    email: str = Field(max_length=255, unique=True, index=True, description="Lower-cased login email")
    name: str = Field(max_length=100, description="Display name")
    role: UserRole = Field(default=UserRole.USER, description="Account role")


class User(UserBase, table=True):
    """Persistent user account.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    password_hash: str = Field(max_length=255)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, sa_column_kwargs={"onupdate": utc_now})

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role})"
