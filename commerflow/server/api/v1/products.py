"""
Product Endpoints.

Public catalogue reads (cached) and admin-only catalogue management. Every
write clears the catalogue cache.
"""

import time
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from commerflow.core.cache import build_cache_key, get_cache
from commerflow.core.database.entities.products import Product
from commerflow.core.errors import ConflictError, NotFoundError
from commerflow.core.logging_config import get_logger
from commerflow.core.models.io import (
    ProductCreate,
    ProductListResponse,
    ProductRead,
    ProductUpdate,
    build_pagination,
)
from commerflow.core.models.io.products import ProductSortField, SortOrder
from commerflow.server.core import constant
from commerflow.server.services.deps import AdminUser, ReposDep

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List Products",
    description="Filter, search, sort and page the catalogue. Results are cached.",
)
async def list_products(
    repos: ReposDep,
    page: int = Query(1, ge=1),
    limit: int = Query(constant.DEFAULT_PAGE_SIZE, ge=1, le=constant.MAX_PAGE_SIZE),
    category_id: Optional[UUID] = Query(None, alias="categoryId"),
    search: Optional[str] = Query(None, max_length=100),
    min_price: Optional[float] = Query(None, ge=0, alias="minPrice"),
    max_price: Optional[float] = Query(None, ge=0, alias="maxPrice"),
    sort_by: ProductSortField = Query("createdAt", alias="sortBy"),
    sort_order: SortOrder = Query("desc", alias="sortOrder"),
) -> ProductListResponse:
    """
    List products.

    - **search**: Case-insensitive match on name or description.
    - **categoryId**: Restrict to one category.
    - **minPrice** / **maxPrice**: Inclusive price bounds.
    - **sortBy**: createdAt, name, price or stock; **sortOrder**: asc or desc.
    """
    cache = get_cache()
    key = build_cache_key(
        "products",
        page=page,
        limit=limit,
        category_id=category_id,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    cached = cache.get(key)
    if cached is not None:
        return cached

    started = time.perf_counter()
    rows, total = await repos.products.search(
        page=page,
        limit=limit,
        category_id=str(category_id) if category_id else None,
        search=search.strip() if search else None,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    cache.metrics.record_query("products.list", (time.perf_counter() - started) * 1000)

    response = ProductListResponse(
        products=[ProductRead.from_entity(product, category) for product, category in rows],
        pagination=build_pagination(page, limit, total),
    )
    cache.set(key, response)
    return response


@router.get(
    "/metrics/performance",
    summary="Catalogue Performance Metrics",
    description="Cache hit rate, query count and recent slow queries (admin only).",
)
async def performance_metrics(admin: AdminUser):
    cache = get_cache()
    return {**cache.metrics.snapshot(), "cacheSize": cache.size(), "cacheTtlSeconds": cache.ttl_seconds}


@router.get(
    "/{product_id}",
    response_model=ProductRead,
    summary="Get Product",
    responses={404: {"description": "Product not found"}},
)
async def get_product(product_id: UUID, repos: ReposDep) -> ProductRead:
    cache = get_cache()
    key = build_cache_key("product", id=product_id)
    cached = cache.get(key)
    if cached is not None:
        return cached

    started = time.perf_counter()
    found = await repos.products.get_with_category(str(product_id))
    cache.metrics.record_query("products.get", (time.perf_counter() - started) * 1000)
    if found is None:
        raise NotFoundError("Product not found")

    response = ProductRead.from_entity(*found)
    cache.set(key, response)
    return response


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Product",
    responses={404: {"description": "Category not found"}},
)
async def create_product(payload: ProductCreate, admin: AdminUser, repos: ReposDep) -> ProductRead:
    category = await repos.categories.get_by_id(payload.category_id)
    if category is None:
        raise NotFoundError("Category not found")

    product = Product(
        name=payload.name,
        description=payload.description,
        price=payload.price,
        stock=payload.stock,
        category_id=category.id,
    )
    product.set_images_list(payload.images)
    product = await repos.products.create(product)
    get_cache().clear()

    logger.info(f"Product created: {product.id} by admin {admin.id}")
    return ProductRead.from_entity(product, category)


@router.put(
    "/{product_id}",
    response_model=ProductRead,
    summary="Update Product",
    responses={404: {"description": "Product or category not found"}},
)
async def update_product(product_id: UUID, payload: ProductUpdate, admin: AdminUser, repos: ReposDep) -> ProductRead:
    """
    Update a product. Only the fields present in the body are changed.
    """
    product = await repos.products.get_by_id(str(product_id))
    if product is None:
        raise NotFoundError("Product not found")

    changes = payload.model_dump(exclude_unset=True)
    if changes.get("category_id") is not None:
        if await repos.categories.get_by_id(changes["category_id"]) is None:
            raise NotFoundError("Category not found")

    images = changes.pop("images", None)
    for field, value in changes.items():
        if value is not None:
            setattr(product, field, value)
    if images is not None:
        product.set_images_list(images)

    product = await repos.products.update(product)
    get_cache().clear()

    category = await repos.categories.get_by_id(product.category_id)
    return ProductRead.from_entity(product, category)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Product",
    responses={404: {"description": "Product not found"}, 409: {"description": "Product has been ordered"}},
)
async def delete_product(product_id: UUID, admin: AdminUser, repos: ReposDep) -> Response:
    product = await repos.products.get_by_id(str(product_id))
    if product is None:
        raise NotFoundError("Product not found")
    if await repos.products.is_ordered(product.id):
        raise ConflictError("Cannot delete a product that is part of an order")

    await repos.carts.delete_items_for_product(product.id)
    await repos.products.remove(product)
    await repos.products.session.commit()
    get_cache().clear()

    logger.info(f"Product deleted: {product.id} by admin {admin.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
