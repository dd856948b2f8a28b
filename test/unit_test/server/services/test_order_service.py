"""
Unit tests for OrderService.

The service is driven directly on a repository bundle so the transactional
behaviour (rollback on a lost stock race) can be checked row by row.
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select

from commerflow.core.database import build_sql_repos
from commerflow.core.database.entities import CartItem, Order
from commerflow.core.errors import NotFoundError, ValidationError
from commerflow.core.models.domain.enums import OrderStatus
from commerflow.server.services import CartService, OrderService


@pytest.fixture
def repos(session):
    return build_sql_repos(session)


class TestCreateFromCart:
    @pytest.mark.asyncio
    async def test_places_order_and_logs_event(self, repos, customer, product):
        await CartService(repos).add_item(customer.id, product.id, 2)

        with patch("commerflow.server.services.order_service.log_order_event") as mock_event:
            order = await OrderService(repos).create_from_cart(customer.id)

        assert order.status == OrderStatus.PENDING
        assert order.total == 50.0
        mock_event.assert_called_once_with("created", order.id, "PENDING", total=50.0)

        refreshed = await repos.products.get_by_id(product.id)
        await repos.products.session.refresh(refreshed)
        assert refreshed.stock == 8

    @pytest.mark.asyncio
    async def test_lost_stock_race_rolls_everything_back(self, repos, session, customer, product):
        await CartService(repos).add_item(customer.id, product.id, 2)

        with patch.object(type(repos.products), "decrement_stock", new=AsyncMock(return_value=False)):
            with pytest.raises(ValidationError, match=f"Not enough stock for {product.name}"):
                await OrderService(repos).create_from_cart(customer.id)

        assert await repos.orders.count() == 0
        cart = await repos.carts.get_by_user(customer.id)
        assert len(await repos.carts.items_with_products(cart.id)) == 1

    @pytest.mark.asyncio
    async def test_user_without_cart(self, repos, session):
        from commerflow.core.database.entities import User

        user = User(email="fresh@commerflow.dev", name="Fresh", password_hash="x")
        session.add(user)
        await session.commit()

        with pytest.raises(ValidationError, match="Cart is empty"):
            await OrderService(repos).create_from_cart(user.id)


class TestStatusChanges:
    @pytest.mark.asyncio
    async def test_update_status_appends_history(self, repos, customer, product):
        await CartService(repos).add_item(customer.id, product.id, 1)
        service = OrderService(repos)
        order = await service.create_from_cart(customer.id)

        updated = await service.update_status(order.id, OrderStatus.DELIVERED, "Left at the door")

        assert updated.status == OrderStatus.DELIVERED
        assert [entry.status for entry in updated.history] == [OrderStatus.DELIVERED, OrderStatus.PENDING]
        assert updated.history[0].note == "Left at the door"

    @pytest.mark.asyncio
    async def test_update_status_unknown_order(self, repos):
        with pytest.raises(NotFoundError):
            await OrderService(repos).update_status("8b0a2d44-2f4e-4f31-9c1e-2a6b5d7e8f90", OrderStatus.SHIPPED)

    @pytest.mark.asyncio
    async def test_cancel_restores_every_line(self, repos, customer, create_product, category):
        first = await create_product(category, name="First", stock=5)
        second = await create_product(category, name="Second", stock=5)
        cart = CartService(repos)
        await cart.add_item(customer.id, first.id, 2)
        await cart.add_item(customer.id, second.id, 5)
        service = OrderService(repos)
        order = await service.create_from_cart(customer.id)

        cancelled = await service.cancel(order.id, customer.id)

        assert cancelled.status == OrderStatus.CANCELLED
        stocks = await repos.products.get_many([first.id, second.id])
        for product in stocks.values():
            await repos.products.session.refresh(product)
        assert {p.name: p.stock for p in stocks.values()} == {"First": 5, "Second": 5}


class TestAttention:
    @pytest.mark.asyncio
    async def test_orders_needing_attention(self, repos, session, customer):
        from datetime import timedelta

        from commerflow.core.database.base import utc_now

        session.add_all(
            [
                Order(user_id=customer.id, total=1.0, created_at=utc_now() - timedelta(hours=3)),
                Order(user_id=customer.id, total=1.0, status=OrderStatus.SHIPPED, created_at=utc_now() - timedelta(hours=3)),
                Order(user_id=customer.id, total=1.0),
            ]
        )
        await session.commit()

        waiting = await OrderService(repos).get_orders_needing_attention()

        assert len(waiting) == 1
        assert waiting[0].status == OrderStatus.PENDING


class TestCartService:
    @pytest.mark.asyncio
    async def test_clear_reports_removed_lines(self, repos, customer, create_product, category):
        service = CartService(repos)
        for name in ("A", "B", "C"):
            await service.add_item(customer.id, (await create_product(category, name=name)).id, 1)

        assert await service.clear(customer.id) == 3
        assert (await service.get_cart(customer.id)).item_count == 0

    @pytest.mark.asyncio
    async def test_add_item_merges_lines(self, repos, session, customer, product):
        service = CartService(repos)
        _, created = await service.add_item(customer.id, product.id, 1)
        line, merged_created = await service.add_item(customer.id, product.id, 2)

        assert created is True
        assert merged_created is False
        assert line.quantity == 3
        assert await session.scalar(select(func.count()).select_from(CartItem)) == 1
