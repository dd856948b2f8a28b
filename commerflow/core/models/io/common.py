"""
Shared building blocks for the I/O models.

Every request and response model speaks camelCase on the wire while keeping
snake_case attribute names in Python.
"""

from __future__ import annotations

import math
import uuid
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialising field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _check_uuid(value: str) -> str:
    try:
        return str(uuid.UUID(value))
    except ValueError as e:
        raise ValueError("must be a valid UUID") from e


UUIDStr = Annotated[str, AfterValidator(_check_uuid)]


def strip_text(value: Any) -> Any:
    """Trim surrounding whitespace so length limits apply to the stored text."""
    return value.strip() if isinstance(value, str) else value


class Pagination(CamelModel):
    """Pagination block returned next to every paged list."""

    page: int
    limit: int
    total: int
    pages: int = Field(description="ceil(total / limit); 0 for an empty result")


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)
