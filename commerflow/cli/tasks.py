"""
Database tasks behind the ``commerflow`` command line.

Each task takes an ``async_sessionmaker`` so it can run against any database
URL the command line is pointed at.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from commerflow.core.database import build_sql_repos
from commerflow.core.database.entities.carts import Cart, CartItem
from commerflow.core.database.entities.categories import Category
from commerflow.core.database.entities.products import Product
from commerflow.core.database.entities.users import User
from commerflow.core.logging_config import get_logger
from commerflow.core.models.domain.enums import UserRole
from commerflow.core.security import hash_password

logger = get_logger(__name__)

SAMPLE_CATEGORIES = ("Electronics", "Clothing", "Books")

SAMPLE_PRODUCTS = (
    {
        "name": "Smartphone",
        "description": "Latest smartphone with advanced features",
        "price": 599.99,
        "stock": 50,
        "category": "Electronics",
        "images": ["https://via.placeholder.com/300x300?text=Smartphone"],
    },
    {
        "name": "Laptop",
        "description": "High-performance laptop for work and gaming",
        "price": 999.99,
        "stock": 25,
        "category": "Electronics",
        "images": ["https://via.placeholder.com/300x300?text=Laptop"],
    },
    {
        "name": "T-Shirt",
        "description": "Comfortable cotton t-shirt",
        "price": 19.99,
        "stock": 100,
        "category": "Clothing",
        "images": ["https://via.placeholder.com/300x300?text=T-Shirt"],
    },
    {
        "name": "Jeans",
        "description": "Classic blue jeans with a relaxed fit",
        "price": 49.99,
        "stock": 75,
        "category": "Clothing",
        "images": ["https://via.placeholder.com/300x300?text=Jeans"],
    },
    {
        "name": "Programming Book",
        "description": "Learn Python programming from scratch",
        "price": 29.99,
        "stock": 30,
        "category": "Books",
        "images": ["https://via.placeholder.com/300x300?text=Book"],
    },
)


@dataclass
class SeedReport:
    categories_created: List[str] = field(default_factory=list)
    products_created: List[str] = field(default_factory=list)
    products_skipped: List[str] = field(default_factory=list)
    products_removed: int = 0


async def seed_catalogue(session_factory: async_sessionmaker[AsyncSession], clean: bool = False) -> SeedReport:
    """
    Upsert the sample categories and products.

    Products that already exist by name are skipped. With ``clean`` every
    product not referenced by an order is deleted first.
    """
    report = SeedReport()
    async with session_factory() as session:
        repos = build_sql_repos(session)

        if clean:
            ordered = set(await repos.products.ordered_product_ids())
            removable = [p.id for p in await repos.products.list() if p.id not in ordered]
            if removable:
                await session.execute(delete(CartItem).where(CartItem.product_id.in_(removable)))
                await session.execute(delete(Product).where(Product.id.in_(removable)))
            report.products_removed = len(removable)

        categories: Dict[str, Category] = {}
        for name in SAMPLE_CATEGORIES:
            category = await repos.categories.find_by_name(name)
            if category is None:
                category = await repos.categories.add(Category(name=name))
                report.categories_created.append(name)
            categories[name] = category

        for data in SAMPLE_PRODUCTS:
            if await repos.products.get_by_name(data["name"]) is not None:
                report.products_skipped.append(data["name"])
                continue
            await repos.products.add(
                Product(
                    name=data["name"],
                    description=data["description"],
                    price=data["price"],
                    stock=data["stock"],
                    category_id=categories[data["category"]].id,
                    images=json.dumps(data["images"]),
                )
            )
            report.products_created.append(data["name"])

        await session.commit()

    logger.info(
        f"Seed finished: {len(report.categories_created)} categories, "
        f"{len(report.products_created)} products created, {report.products_removed} removed"
    )
    return report


async def create_admin(
    session_factory: async_sessionmaker[AsyncSession], email: str, password: str, name: str
) -> Tuple[User, bool]:
    """
    Create the administrator account, or promote an existing account to ADMIN.

    Returns:
        ``(user, created)``; ``created`` is False when the account already existed
    """
    async with session_factory() as session:
        repos = build_sql_repos(session)
        user = await repos.users.get_by_email(email)
        if user is not None:
            if user.role != UserRole.ADMIN:
                user.role = UserRole.ADMIN
                user = await repos.users.update(user)
                logger.info(f"Promoted existing user {user.email} to ADMIN")
            return user, False

        user = await repos.users.add(
            User(email=email.strip().lower(), name=name, password_hash=hash_password(password), role=UserRole.ADMIN)
        )
        await repos.carts.add(Cart(user_id=user.id))
        await session.commit()
        logger.info(f"Admin user created: {user.email}")
        return user, True


async def list_users(session_factory: async_sessionmaker[AsyncSession]) -> List[User]:
    async with session_factory() as session:
        result = await session.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())


async def reset_password(session_factory: async_sessionmaker[AsyncSession], email: str, password: str) -> Optional[User]:
    """Rehash a user's password; returns None when no account has that email."""
    async with session_factory() as session:
        repos = build_sql_repos(session)
        user = await repos.users.get_by_email(email)
        if user is None:
            return None
        user.password_hash = hash_password(password)
        user = await repos.users.update(user)
        logger.info(f"Password reset for {user.email}")
        return user


async def count_entities(session_factory: async_sessionmaker[AsyncSession]) -> Dict[str, int]:
    async with session_factory() as session:
        repos = build_sql_repos(session)
        return {
            "users": await repos.users.count(),
            "categories": await repos.categories.count(),
            "products": await repos.products.count(),
            "orders": await repos.orders.count(),
        }
