"""
Category I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List

from pydantic import Field, field_validator

from .common import CamelModel, strip_text
from .products import ProductRead


class CategoryCreate(CamelModel):
    name: str = Field(min_length=2, max_length=50)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: Any) -> Any:
        return strip_text(value)


class CategoryUpdate(CategoryCreate):
    pass


class CategoryRead(CamelModel):
    id: str
    name: str
    created_at: datetime
    updated_at: datetime


class CategoryWithCount(CategoryRead):
    product_count: int = 0


class CategoryDetail(CategoryRead):
    """A category with its products, newest first."""

    products: List[ProductRead] = Field(default_factory=list)
