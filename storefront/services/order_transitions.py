"""Order Transitions — approve and cancel, applied under a row lock.

Invariants:
    - Lookup includes soft-deleted orders: acting on a canceled order is an
      InvalidTransitionError, not a not-found
    - Check order: exists -> caller authorized -> transition allowed
    - The order row is locked for the whole transition; the status UPDATE is also
      guarded by status='pending' so two racing transitions cannot both apply
    - Cancel sets deleted_at and restores the stock of every item in the same unit of work
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from storefront.core.domain_types import (
    Caller, OrderId, OrderStatus, is_storable_id,
)
from storefront.core.errors import InvalidTransitionError, OrderNotFoundError
from storefront.core.order_lifecycle import (
    authorize_approve, authorize_cancel, check_transition,
)
from storefront.core.repository_protocols import StorageHandle
from storefront.models.order import Order
from storefront.models.product import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionResult:
    order_id: OrderId
    status: OrderStatus


class OrderTransitions:
    """Order Lifecycle State Machine — the only writer of Order.status."""

    def __init__(self, storage: StorageHandle):
        self._storage = storage

    async def approve(self, caller: Caller, order_id: OrderId) -> TransitionResult:
        """pending -> approved. Privileged callers only."""
        async with self._storage.session() as db:
            order = await self._lock_order(db, order_id)
            authorize_approve(caller)
            check_transition(order.id, order.status, OrderStatus.APPROVED)
            await self._set_status(db, order, OrderStatus.APPROVED)
            await db.commit()

        logger.info(
            f"Order {order_id} approved",
            extra={"order_id": order_id, "user_id": caller.user_id},
        )
        return TransitionResult(order_id=order_id, status=OrderStatus.APPROVED)

    async def cancel(self, caller: Caller, order_id: OrderId) -> TransitionResult:
        """pending -> canceled. Owner or privileged caller; restores stock."""
        async with self._storage.session() as db:
            order = await self._lock_order(db, order_id)
            authorize_cancel(caller, order.user_id)
            check_transition(order.id, order.status, OrderStatus.CANCELED)
            await self._set_status(
                db, order, OrderStatus.CANCELED,
                deleted_at=datetime.now(timezone.utc),
            )
            await self._restock(db, order)
            await db.commit()

        logger.info(
            f"Order {order_id} canceled, {len(order.items)} item(s) restocked",
            extra={"order_id": order_id, "user_id": caller.user_id},
        )
        return TransitionResult(order_id=order_id, status=OrderStatus.CANCELED)

    async def _lock_order(self, db: AsyncSession, order_id: OrderId) -> Order:
        if not is_storable_id(order_id):
            raise OrderNotFoundError(order_id)
        result = await db.execute(
            select(Order)
            .where(Order.id == order_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        order = result.scalar_one_or_none()
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def _set_status(
        self, db: AsyncSession, order: Order, target: OrderStatus, **fields,
    ) -> None:
        result = await db.execute(
            update(Order)
            .where(Order.id == order.id)
            .where(Order.status == OrderStatus.PENDING.value)
            .values(status=target.value, **fields)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            # Lost a race with another transition on a store without row locks.
            raise InvalidTransitionError(order.id, order.status, target.value)
        set_committed_value(order, "status", target.value)
        for name, value in fields.items():
            set_committed_value(order, name, value)

    async def _restock(self, db: AsyncSession, order: Order) -> None:
        for item in order.items:
            await db.execute(
                update(Product)
                .where(Product.id == item.product_id)
                .values(stock=Product.stock + item.quantity)
                .execution_options(synchronize_session=False)
            )
