"""Order Placement — turns a requested item list into a durable order in one unit of work.

Invariants:
    - Input shape validated before any storage access (EmptyItemListError, ValidationError)
    - Every touched product row is locked (SELECT ... FOR UPDATE) before any line is
      checked, in ascending id order: placements over overlapping products queue
      instead of deadlocking
    - Missing products and short stock are reported for the first offending line in
      request order, whatever the locking order
    - Stock is checked against the cumulative quantity requested per product
    - total_amount is computed from the prices observed during lookup (snapshot)
    - Stock decrement is conditional (stock >= quantity); zero rows affected means a
      concurrent placement won the last units -> InsufficientStockError
    - Any failure before commit leaves no order, no item and no stock change

Design Decisions:
    - Row lock + conditional decrement: the lock serializes placements on PostgreSQL,
      the conditional UPDATE keeps the invariant on stores that ignore FOR UPDATE (SQLite)
    - Items persisted and stock decremented in request order
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain_types import OrderId, OrderLine, UserId
from storefront.core.errors import InsufficientStockError, ProductNotFoundError
from storefront.core.inventory import (
    cumulative_quantities, is_orderable, order_total, validate_order_lines,
)
from storefront.core.order_lifecycle import INITIAL_STATUS
from storefront.core.repository_protocols import StorageHandle
from storefront.models.order import Order
from storefront.models.order_item import OrderItem
from storefront.models.product import Product

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 100


@dataclass(frozen=True)
class PlacementResult:
    order_id: OrderId
    total_amount: Decimal


@dataclass(frozen=True)
class _PricedLine:
    product_id: int
    quantity: int
    price: Decimal


class OrderPlacement:
    """Order Transaction Coordinator."""

    def __init__(self, storage: StorageHandle, max_items: int = DEFAULT_MAX_ITEMS):
        self._storage = storage
        self._max_items = max_items

    async def place(self, owner: UserId, lines: list[OrderLine]) -> PlacementResult:
        """Validate, price, reserve stock and commit a new pending order."""
        validate_order_lines(lines, self._max_items)

        async with self._storage.session() as db:
            priced = await self._lock_and_price(db, lines)
            total = order_total((p.price, p.quantity) for p in priced)

            order = Order(
                user_id=owner, total_amount=total,
                status=INITIAL_STATUS.value,
            )
            db.add(order)
            await db.flush()

            for line in priced:
                db.add(OrderItem(
                    order_id=order.id, product_id=line.product_id,
                    quantity=line.quantity, price=line.price,
                ))
                await self._decrement_stock(db, line.product_id, line.quantity)

            await db.commit()

        logger.info(
            f"Order {order.id} placed: {len(priced)} item(s), total {total}",
            extra={"order_id": order.id, "user_id": owner},
        )
        return PlacementResult(order_id=OrderId(order.id), total_amount=total)

    async def _lock_and_price(
        self, db: AsyncSession, lines: list[OrderLine],
    ) -> list[_PricedLine]:
        """Lock every product in id order, then check and price lines in request order."""
        requested = cumulative_quantities(lines)
        locked = {
            product_id: await self._lock_product(db, product_id)
            for product_id in sorted(requested)
        }

        checked: set[int] = set()
        priced: list[_PricedLine] = []
        for line in lines:
            product = locked[line.product_id]
            if product is None:
                logger.warning(
                    f"Placement references missing product {line.product_id}",
                    extra={"product_id": line.product_id},
                )
                raise ProductNotFoundError(line.product_id)
            if product.id not in checked:
                checked.add(product.id)
                if not is_orderable(product.stock, requested[product.id]):
                    logger.warning(
                        f"Insufficient stock for product {product.id}: "
                        f"requested {requested[product.id]}, "
                        f"available {product.stock}",
                        extra={"product_id": product.id},
                    )
                    raise InsufficientStockError(
                        product.id, requested[product.id], product.stock,
                    )
            priced.append(_PricedLine(
                product_id=product.id, quantity=line.quantity,
                price=product.price,
            ))
        return priced

    async def _lock_product(
        self, db: AsyncSession, product_id: int,
    ) -> Product | None:
        result = await db.execute(
            select(Product)
            .where(Product.id == product_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _decrement_stock(
        self, db: AsyncSession, product_id: int, quantity: int,
    ) -> None:
        """Take stock only if enough is still there."""
        result = await db.execute(
            update(Product)
            .where(Product.id == product_id)
            .where(Product.stock >= quantity)
            .values(stock=Product.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            logger.warning(
                f"Stock for product {product_id} taken by a concurrent order",
                extra={"product_id": product_id},
            )
            raise InsufficientStockError(product_id, quantity)
