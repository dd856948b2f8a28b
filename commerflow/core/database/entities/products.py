"""
Product entity models.

This module contains the database entity for catalogue products. Image URLs
are stored as a JSON array in a text column.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import List

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class ProductBase(Base):
    """Base fields for catalogue products."""

    name: str = Field(max_length=100, index=True, description="Product name")
    description: str = Field(max_length=1000, description="Product description")
    price: float = Field(ge=0, description="Unit price")
    stock: int = Field(default=0, ge=0, description="Units available for sale")
    images: str = Field(default="[]", description="JSON array of image URLs")


class Product(ProductBase, table=True):
    """Persistent catalogue product.

    Table: products
    """

    __tablename__ = "products"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    category_id: str = Field(foreign_key="categories.id", index=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, sa_column_kwargs={"onupdate": utc_now})

    def get_images_list(self) -> List[str]:
        """Get images as a list."""
        try:
            return json.loads(self.images) if self.images else []
        except (json.JSONDecodeError, TypeError):
            return []

    def set_images_list(self, images: List[str]) -> None:
        """Set images from a list."""
        self.images = json.dumps(list(images))

    def __repr__(self) -> str:
        return f"Product(id={self.id}, name={self.name}, stock={self.stock})"
