"""
Category Endpoints.

Public category reads and admin-only category management. Category names are
unique ignoring case.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Response, status

from commerflow.core.cache import get_cache
from commerflow.core.database.entities.categories import Category
from commerflow.core.errors import ConflictError, NotFoundError, ValidationError
from commerflow.core.logging_config import get_logger
from commerflow.core.models.io import (
    CategoryCreate,
    CategoryDetail,
    CategoryRead,
    CategoryUpdate,
    CategoryWithCount,
    ProductRead,
)
from commerflow.server.services.deps import AdminUser, ReposDep

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=List[CategoryWithCount], summary="List Categories")
async def list_categories(repos: ReposDep) -> List[CategoryWithCount]:
    """All categories ordered by name, each with its number of products."""
    rows = await repos.categories.list_with_product_counts()
    result = []
    for category, count in rows:
        read = CategoryWithCount.model_validate(category)
        read.product_count = count
        result.append(read)
    return result


@router.get(
    "/{category_id}",
    response_model=CategoryDetail,
    summary="Get Category",
    responses={404: {"description": "Category not found"}},
)
async def get_category(category_id: UUID, repos: ReposDep) -> CategoryDetail:
    category = await repos.categories.get_by_id(str(category_id))
    if category is None:
        raise NotFoundError("Category not found")
    detail = CategoryDetail.model_validate(category)
    detail.products = [ProductRead.from_entity(product) for product in await repos.categories.products_of(category.id)]
    return detail


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Category",
    responses={409: {"description": "Category already exists"}},
)
async def create_category(payload: CategoryCreate, admin: AdminUser, repos: ReposDep) -> CategoryRead:
    if await repos.categories.find_by_name(payload.name) is not None:
        raise ConflictError("Category already exists")
    category = await repos.categories.create(Category(name=payload.name))
    get_cache().clear()
    logger.info(f"Category created: {category.name}")
    return CategoryRead.model_validate(category)


@router.put(
    "/{category_id}",
    response_model=CategoryRead,
    summary="Update Category",
    responses={404: {"description": "Category not found"}, 409: {"description": "Category already exists"}},
)
async def update_category(category_id: UUID, payload: CategoryUpdate, admin: AdminUser, repos: ReposDep) -> CategoryRead:
    category = await repos.categories.get_by_id(str(category_id))
    if category is None:
        raise NotFoundError("Category not found")
    if await repos.categories.find_by_name(payload.name, exclude_id=category.id) is not None:
        raise ConflictError("Category already exists")
    category.name = payload.name
    category = await repos.categories.update(category)
    get_cache().clear()
    return CategoryRead.model_validate(category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Category",
    responses={400: {"description": "Category still has products"}, 404: {"description": "Category not found"}},
)
async def delete_category(category_id: UUID, admin: AdminUser, repos: ReposDep) -> Response:
    category = await repos.categories.get_by_id(str(category_id))
    if category is None:
        raise NotFoundError("Category not found")
    if await repos.categories.product_count(category.id) > 0:
        raise ValidationError("Cannot delete category with products")
    await repos.categories.delete(category.id)
    get_cache().clear()
    logger.info(f"Category deleted: {category.name}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
