"""
User I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import EmailStr, Field, field_validator

from commerflow.core.models.domain.enums import UserRole

from .common import CamelModel, strip_text


class UserRegister(CamelModel):
    """Schema for registering a new account."""

    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: Any) -> Any:
        return strip_text(value)

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class UserLogin(CamelModel):
    """Schema for logging in."""

    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class UserUpdate(CamelModel):
    """Schema for updating the caller's own profile. Omitted fields stay unchanged."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: Any) -> Any:
        return strip_text(value)

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value is not None else None


class UserRead(CamelModel):
    """Public view of an account; never includes the password hash."""

    id: str
    email: str
    name: str
    role: UserRole
    created_at: datetime
    updated_at: datetime


class UserSummary(CamelModel):
    id: str
    name: str
    email: str


class AuthResponse(CamelModel):
    """Returned by register and login."""

    user: UserRead
    token: str
