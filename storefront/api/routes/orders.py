"""Order Routes — place, inspect, list, cancel and approve orders.

Invariants:
    - Every route requires a caller identity; approve additionally requires admin
    - Routes translate payloads to domain types and delegate to services
    - Domain errors propagate to the global StorefrontError handler
"""

from fastapi import APIRouter, Depends, Path, Query, status

from storefront.api.deps import (
    get_caller, get_order_placement, get_order_queries,
    get_order_transitions, require_admin,
)
from storefront.core.domain_types import (
    MAX_INT32, Caller, OrderId, OrderLine, ProductId,
)
from storefront.schemas.order import (
    OrderCreate, OrderDetail, OrderHistory, OrderItemOut, OrderOut,
    OrderPlaced, OrderTransitioned,
)
from storefront.services.order_queries import OrderQueries
from storefront.services.order_transitions import OrderTransitions
from storefront.services.place_order import OrderPlacement

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.post(
    "", response_model=OrderPlaced, status_code=status.HTTP_201_CREATED,
)
async def place_order(
    body: OrderCreate,
    caller: Caller = Depends(get_caller),
    placement: OrderPlacement = Depends(get_order_placement),
):
    """Place an order for the calling user."""
    lines = [
        OrderLine(product_id=ProductId(i.product_id), quantity=i.quantity)
        for i in body.items
    ]
    result = await placement.place(caller.user_id, lines)
    return OrderPlaced(
        order_id=result.order_id, total_amount=result.total_amount,
    )


@router.get("", response_model=OrderHistory)
async def list_orders(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0, le=MAX_INT32),
    caller: Caller = Depends(get_caller),
    queries: OrderQueries = Depends(get_order_queries),
):
    """Order history: own orders, or every order for admins."""
    orders = await queries.history(caller, limit=limit, offset=offset)
    return OrderHistory(
        orders=[OrderOut.model_validate(o) for o in orders],
        pagination={"limit": limit, "offset": offset},
    )


@router.get("/{order_id}", response_model=OrderDetail)
async def get_order(
    order_id: int = Path(ge=1, le=MAX_INT32),
    caller: Caller = Depends(get_caller),
    queries: OrderQueries = Depends(get_order_queries),
):
    """Single order with its items."""
    order = await queries.get(caller, OrderId(order_id))
    return OrderDetail(
        order=OrderOut.model_validate(order),
        items=[OrderItemOut.model_validate(i) for i in order.items],
    )


@router.delete("/{order_id}", response_model=OrderTransitioned)
async def cancel_order(
    order_id: int = Path(ge=1, le=MAX_INT32),
    caller: Caller = Depends(get_caller),
    transitions: OrderTransitions = Depends(get_order_transitions),
):
    """Cancel a pending order (owner or admin)."""
    result = await transitions.cancel(caller, OrderId(order_id))
    return OrderTransitioned(
        message="Order canceled successfully",
        order_id=result.order_id, status=result.status,
    )


@router.patch("/{order_id}/approve", response_model=OrderTransitioned)
async def approve_order(
    order_id: int = Path(ge=1, le=MAX_INT32),
    caller: Caller = Depends(require_admin),
    transitions: OrderTransitions = Depends(get_order_transitions),
):
    """Approve a pending order (admin only)."""
    result = await transitions.approve(caller, OrderId(order_id))
    return OrderTransitioned(
        message="Order approved successfully",
        order_id=result.order_id, status=result.status,
    )
