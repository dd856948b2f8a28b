"""
Service for placing orders and moving them through their lifecycle.

Checkout, status changes and cancellation each run as a single transaction:
either every row (order, lines, history, stock, cart) is written or none is.
Whenever stock moves the catalogue cache is cleared so product reads show
the new levels.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Dict, List, Optional, Sequence

from commerflow.core.cache import get_cache
from commerflow.core.database import SqlRepoBundle
from commerflow.core.database.base import utc_now
from commerflow.core.database.entities.orders import Order, OrderItem
from commerflow.core.database.entities.users import User
from commerflow.core.errors import NotFoundError, ValidationError
from commerflow.core.logging_config import get_logger
from commerflow.core.models.domain.enums import OrderStatus
from commerflow.core.models.io import (
    OrderHistoryRead,
    OrderItemRead,
    OrderRead,
    OrderStats,
    ProductSummary,
    UserOrdersResponse,
    UserSummary,
    build_pagination,
)
from commerflow.core.monitoring import log_order_event

logger = get_logger(__name__)

ATTENTION_THRESHOLD = timedelta(hours=1)


class OrderService:
    """Order placement, status tracking and order reads."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos
        self.session = repos.orders.session

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def build_reads(
        self,
        orders: Sequence[Order],
        full_history: bool = False,
        users: Optional[Dict[str, User]] = None,
    ) -> List[OrderRead]:
        """
        Assemble API views for a batch of orders.

        Args:
            orders: Orders to render, in the order they should appear
            full_history: Embed the whole history instead of only the newest entry
            users: Optional ``user_id -> User`` map to embed a user summary
        """
        order_ids = [order.id for order in orders]
        lines = await self.repos.orders.items_for_orders(order_ids)
        if full_history:
            histories = {order_id: await self.repos.orders.history(order_id) for order_id in order_ids}
        else:
            latest = await self.repos.orders.latest_history(order_ids)
            histories = {order_id: [latest[order_id]] if order_id in latest else [] for order_id in order_ids}

        reads = []
        for order in orders:
            read = OrderRead.model_validate(order)
            read.items = [
                OrderItemRead(
                    id=item.id,
                    order_id=item.order_id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price=item.price,
                    product=ProductSummary.model_validate(product),
                )
                for item, product in lines.get(order.id, [])
            ]
            read.history = [OrderHistoryRead.model_validate(entry) for entry in histories.get(order.id, [])]
            if users and order.user_id in users:
                read.user = UserSummary.model_validate(users[order.user_id])
            reads.append(read)
        return reads

    async def get_order(self, order_id: str, user_id: Optional[str] = None) -> OrderRead:
        """
        Return one order with its lines and full history.

        Args:
            order_id: The order to read
            user_id: When given, orders of other users are reported as not found

        Raises:
            NotFoundError: If the order does not exist (or is not the caller's)
        """
        order = await self._load(order_id, user_id)
        return (await self.build_reads([order], full_history=True))[0]

    async def list_orders(self, user_id: str) -> List[OrderRead]:
        """The caller's orders, newest first, each with its latest history entry."""
        orders = await self.repos.orders.list_for_user(user_id)
        return await self.build_reads(orders)

    async def list_orders_page(self, user_id: str, page: int, limit: int) -> UserOrdersResponse:
        """One page of the caller's orders plus per-status counts."""
        counts = await self.repos.orders.status_counts(user_id)
        total = sum(counts.values())
        orders = await self.repos.orders.list_for_user(user_id, limit=limit, offset=(page - 1) * limit)
        stats = OrderStats(total=total, **{status.value.lower(): count for status, count in counts.items()})
        return UserOrdersResponse(
            orders=await self.build_reads(orders),
            pagination=build_pagination(page, limit, total),
            stats=stats,
        )

    async def get_history(self, order_id: str, user_id: Optional[str] = None) -> List[OrderHistoryRead]:
        """Status history of an order, newest first."""
        await self._load(order_id, user_id)
        return [OrderHistoryRead.model_validate(entry) for entry in await self.repos.orders.history(order_id)]

    async def get_orders_needing_attention(self, older_than: timedelta = ATTENTION_THRESHOLD) -> List[Order]:
        """Pending orders that have waited longer than ``older_than``."""
        return await self.repos.orders.pending_older_than(utc_now() - older_than)

    async def _load(self, order_id: str, user_id: Optional[str]) -> Order:
        if user_id is None:
            order = await self.repos.orders.get_by_id(order_id)
        else:
            order = await self.repos.orders.get_for_user(order_id, user_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_from_cart(self, user_id: str) -> OrderRead:
        """
        Turn the caller's cart into a pending order.

        Unit prices are copied onto the order lines, stock is taken for every
        line, an initial ``PENDING`` history entry is written and the cart is
        emptied.

        Raises:
            ValidationError: If the cart is empty or a product lacks stock
        """
        cart = await self.repos.carts.get_by_user(user_id)
        lines = await self.repos.carts.items_with_products(cart.id) if cart else []
        if not lines:
            raise ValidationError("Cart is empty")

        for item, product, _ in lines:
            if item.quantity > product.stock:
                raise ValidationError(f"Not enough stock for {product.name}")

        total = round(sum(product.price * item.quantity for item, product, _ in lines), 2)

        try:
            order = await self.repos.orders.add(Order(user_id=user_id, total=total, status=OrderStatus.PENDING))
            for item, product, _ in lines:
                if not await self.repos.products.decrement_stock(product.id, item.quantity):
                    raise ValidationError(f"Not enough stock for {product.name}")
                await self.repos.orders.add(
                    OrderItem(order_id=order.id, product_id=product.id, quantity=item.quantity, price=product.price)
                )
            await self.repos.orders.add_history(order.id, OrderStatus.PENDING, "Order created")
            await self.repos.carts.clear(cart.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        get_cache().clear()

        log_order_event("created", order.id, order.status.value, total=total)
        return await self.get_order(order.id)

    async def update_status(self, order_id: str, status: OrderStatus, note: Optional[str] = None) -> OrderRead:
        """
        Move an order to a new status and record it in the history.

        Moving an order to ``CANCELLED`` returns its units to stock.

        Raises:
            NotFoundError: If the order does not exist
            ValidationError: If the order is already cancelled
        """
        order = await self._load(order_id, None)
        if order.status == OrderStatus.CANCELLED:
            raise ValidationError("Cannot change the status of a cancelled order")

        try:
            if status == OrderStatus.CANCELLED:
                await self._restock(order.id)
            order.status = status
            order.updated_at = utc_now()
            await self.repos.orders.add(order)
            await self.repos.orders.add_history(order.id, status, note)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        if status == OrderStatus.CANCELLED:
            get_cache().clear()

        log_order_event("status changed", order.id, status.value, total=order.total)
        return await self.get_order(order.id)

    async def cancel(self, order_id: str, user_id: str) -> OrderRead:
        """
        Cancel one of the caller's pending orders and restock its products.

        Raises:
            NotFoundError: If the order does not exist or is not the caller's
            ValidationError: If the order is no longer pending
        """
        order = await self._load(order_id, user_id)
        if order.status != OrderStatus.PENDING:
            raise ValidationError("Only pending orders can be cancelled")

        try:
            await self._restock(order.id)
            order.status = OrderStatus.CANCELLED
            order.updated_at = utc_now()
            await self.repos.orders.add(order)
            await self.repos.orders.add_history(order.id, OrderStatus.CANCELLED, "Order cancelled by user")
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        get_cache().clear()

        log_order_event("cancelled", order.id, order.status.value, total=order.total)
        return await self.get_order(order.id, user_id)

    async def _restock(self, order_id: str) -> None:
        lines = await self.repos.orders.items_for_orders([order_id])
        for item, _ in lines.get(order_id, []):
            await self.repos.products.increment_stock(item.product_id, item.quantity)
