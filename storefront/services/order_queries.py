"""Order Queries — side-effect-free reads of the Order Ledger.

Invariants:
    - Soft-deleted (canceled) orders are invisible: fetching one is OrderNotFoundError
    - Non-privileged callers only see their own orders
    - Existence is checked before ownership (404 before 403)
    - History is newest first, paginated by limit/offset
"""

from sqlalchemy import select

from storefront.core.domain_types import Caller, OrderId, is_storable_id
from storefront.core.errors import OrderNotFoundError
from storefront.core.order_lifecycle import authorize_view
from storefront.core.repository_protocols import StorageHandle
from storefront.models.order import Order


class OrderQueries:
    """Read-only order lookups for the routing layer."""

    def __init__(self, storage: StorageHandle):
        self._storage = storage

    async def get(self, caller: Caller, order_id: OrderId) -> Order:
        """Single order with its items."""
        if not is_storable_id(order_id):
            raise OrderNotFoundError(order_id)
        async with self._storage.session() as db:
            result = await db.execute(
                select(Order)
                .where(Order.id == order_id)
                .where(Order.deleted_at.is_(None))
            )
            order = result.scalar_one_or_none()
        if order is None:
            raise OrderNotFoundError(order_id)
        authorize_view(caller, order.user_id)
        return order

    async def history(
        self, caller: Caller, limit: int = 10, offset: int = 0,
    ) -> list[Order]:
        """Visible orders, newest first."""
        query = (
            select(Order)
            .where(Order.deleted_at.is_(None))
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        if not caller.is_admin:
            query = query.where(Order.user_id == caller.user_id)
        query = query.limit(limit).offset(offset)

        async with self._storage.session() as db:
            result = await db.execute(query)
            return list(result.scalars().all())
