"""Test configuration for database unit tests.

Repositories are exercised against the per-test in-memory SQLite database
provided by ``test/unit_test/conftest.py``.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Awaitable, Callable, List, Optional, Tuple

import pytest_asyncio

from commerflow.core.database.base import utc_now
from commerflow.core.database.entities import Order, OrderItem, Product, User
from commerflow.core.models.domain.enums import OrderStatus


@pytest_asyncio.fixture
async def place_order(session_factory) -> Callable[..., Awaitable[Order]]:
    """Factory writing an order and its lines directly, bypassing stock checks."""

    async def _place(
        user: User,
        lines: List[Tuple[Product, int]],
        status: OrderStatus = OrderStatus.PENDING,
        days_ago: Optional[int] = None,
    ) -> Order:
        async with session_factory() as session:
            order = Order(
                user_id=user.id,
                total=round(sum(product.price * quantity for product, quantity in lines), 2),
                status=status,
            )
            if days_ago is not None:
                order.created_at = utc_now() - timedelta(days=days_ago)
            session.add(order)
            await session.flush()
            for product, quantity in lines:
                session.add(OrderItem(order_id=order.id, product_id=product.id, quantity=quantity, price=product.price))
            await session.commit()
            return order

    return _place
