"""Shared fixtures for unit tests.

Each test gets its own in-memory SQLite database (a ``StaticPool`` keeps the
single connection alive) with every table created from the ORM metadata.
"""

from __future__ import annotations

from typing import AsyncGenerator, Awaitable, Callable, Optional

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel.pool import StaticPool

from commerflow.core.database import create_all, create_engine, create_sessionmaker
from commerflow.core.database.entities import Cart, Category, Product, User
from commerflow.core.models.domain.enums import UserRole
from commerflow.core.security import hash_password

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "secret123"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh database engine for one test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return create_sessionmaker(test_engine)


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def create_user(session_factory) -> Callable[..., Awaitable[User]]:
    """Factory persisting an account (with its empty cart)."""

    async def _create(
        email: str = "customer@commerflow.dev",
        name: str = "Casey Customer",
        password: str = TEST_PASSWORD,
        role: UserRole = UserRole.USER,
    ) -> User:
        async with session_factory() as session:
            user = User(email=email, name=name, password_hash=hash_password(password), role=role)
            session.add(user)
            await session.flush()
            session.add(Cart(user_id=user.id))
            await session.commit()
            return user

    return _create


@pytest_asyncio.fixture
async def create_category(session_factory) -> Callable[..., Awaitable[Category]]:
    async def _create(name: str = "Electronics") -> Category:
        async with session_factory() as session:
            category = Category(name=name)
            session.add(category)
            await session.commit()
            return category

    return _create


@pytest_asyncio.fixture
async def create_product(session_factory) -> Callable[..., Awaitable[Product]]:
    """Factory persisting a product in the given category."""

    async def _create(
        category: Category,
        name: str = "Wireless Mouse",
        price: float = 25.0,
        stock: int = 10,
        description: Optional[str] = None,
    ) -> Product:
        async with session_factory() as session:
            product = Product(
                name=name,
                description=description or f"{name} for everyday use",
                price=price,
                stock=stock,
                category_id=category.id,
            )
            session.add(product)
            await session.commit()
            return product

    return _create


@pytest_asyncio.fixture
async def customer(create_user) -> User:
    return await create_user()


@pytest_asyncio.fixture
async def admin_user(create_user) -> User:
    return await create_user(email="admin@commerflow.dev", name="Avery Admin", role=UserRole.ADMIN)


@pytest_asyncio.fixture
async def category(create_category) -> Category:
    return await create_category()


@pytest_asyncio.fixture
async def product(create_product, category) -> Product:
    return await create_product(category)
