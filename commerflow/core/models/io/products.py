"""
Product I/O models for API requests and responses.

The ``images`` column holds a JSON array; the read models accept either that
raw string or an already decoded list.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import Field, field_validator

from .common import CamelModel, Pagination, UUIDStr, strip_text

ProductSortField = Literal["createdAt", "name", "price", "stock"]
SortOrder = Literal["asc", "desc"]


def decode_image_list(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return json.loads(value) if value else []
        except json.JSONDecodeError:
            return []
    return value


class ProductCreate(CamelModel):
    """Schema for adding a product to the catalogue."""

    name: str = Field(min_length=3, max_length=100)
    description: str = Field(min_length=10, max_length=1000)
    price: float = Field(ge=0)
    stock: int = Field(ge=0)
    category_id: UUIDStr
    images: List[str] = Field(default_factory=list)

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text_fields(cls, value: Any) -> Any:
        return strip_text(value)


class ProductUpdate(CamelModel):
    """Schema for a partial product update. Omitted fields stay unchanged."""

    name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, min_length=10, max_length=1000)
    price: Optional[float] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0)
    category_id: Optional[UUIDStr] = None
    images: Optional[List[str]] = None

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text_fields(cls, value: Any) -> Any:
        return strip_text(value)


class CategorySummary(CamelModel):
    id: str
    name: str


class ProductRead(CamelModel):
    """Schema for reading a product, optionally with its category embedded."""

    id: str
    name: str
    description: str
    price: float
    stock: int
    images: List[str] = Field(default_factory=list)
    category_id: str
    created_at: datetime
    updated_at: datetime
    category: Optional[CategorySummary] = None

    @field_validator("images", mode="before")
    @classmethod
    def decode_images(cls, value: Any) -> Any:
        return decode_image_list(value)

    @classmethod
    def from_entity(cls, product: Any, category: Any = None) -> "ProductRead":
        read = cls.model_validate(product)
        if category is not None:
            read.category = CategorySummary.model_validate(category)
        return read


class ProductSummary(CamelModel):
    """Compact product view embedded in order lines."""

    id: str
    name: str
    price: float
    images: List[str] = Field(default_factory=list)

    @field_validator("images", mode="before")
    @classmethod
    def decode_images(cls, value: Any) -> Any:
        return decode_image_list(value)


class ProductListResponse(CamelModel):
    products: List[ProductRead]
    pagination: Pagination
