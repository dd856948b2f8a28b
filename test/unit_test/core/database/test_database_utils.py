"""Unit tests for engine and session helpers."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from sqlalchemy import inspect

from commerflow.core.database import build_sql_repos, create_all, create_engine, create_sessionmaker, drop_all
from commerflow.core.database.repositories import ProductRepository, UserRepository


class TestCreateEngine:
    @pytest.mark.parametrize(
        "url",
        [
            "postgres://u:p@db:5432/shop",
            "postgresql://u:p@db:5432/shop",
            "postgresql+psycopg://u:p@db:5432/shop",
        ],
    )
    def test_postgres_urls_use_asyncpg(self, url):
        with patch("commerflow.core.database.utils.create_async_engine") as mock_create:
            create_engine(url)

        args, kwargs = mock_create.call_args
        assert args[0] == "postgresql+asyncpg://u:p@db:5432/shop"
        assert kwargs["pool_pre_ping"] is True

    def test_sqlite_url_untouched(self):
        with patch("commerflow.core.database.utils.create_async_engine") as mock_create:
            create_engine("sqlite+aiosqlite:///:memory:", echo=True)

        mock_create.assert_called_once_with("sqlite+aiosqlite:///:memory:", echo=True)


class TestSchemaHelpers:
    async def test_create_and_drop_all(self, tmp_path):
        engine = create_engine(f"sqlite+aiosqlite:///{tmp_path}/schema.db")

        await create_all(engine)
        async with engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        assert {"users", "categories", "products", "carts", "cart_items", "orders", "order_items", "order_history"} <= set(tables)

        await drop_all(engine)
        async with engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        assert tables == []

        await engine.dispose()

    async def test_sessionmaker_keeps_objects_after_commit(self, test_engine):
        factory = create_sessionmaker(test_engine)
        assert factory.kw["expire_on_commit"] is False


async def test_build_sql_repos_shares_session(session):
    repos = build_sql_repos(session)

    assert isinstance(repos.users, UserRepository)
    assert isinstance(repos.products, ProductRepository)
    assert repos.users.session is repos.orders.session is session
