"""Order Lifecycle — legal status transitions and who may trigger them.

Invariants:
    - pending is the only initial state and the only non-terminal state
    - ALLOWED_TRANSITIONS is the single source of truth for status changes
    - approve: privileged caller only; cancel: owner or privileged caller
    - Authorization is checked before the transition itself
    - Every check here is pure: raises a typed error or returns None
"""

from storefront.core.domain_types import Caller, OrderStatus
from storefront.core.errors import ForbiddenError, InvalidTransitionError


INITIAL_STATUS = OrderStatus.PENDING

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.APPROVED, OrderStatus.CANCELED}),
    OrderStatus.APPROVED: frozenset(),
    OrderStatus.CANCELED: frozenset(),
}


def check_transition(order_id: int, current: str, target: OrderStatus) -> None:
    """Raise InvalidTransitionError unless current -> target is allowed."""
    current_status = OrderStatus(current)
    if target not in ALLOWED_TRANSITIONS[current_status]:
        raise InvalidTransitionError(order_id, current_status.value, target.value)


def can_access(caller: Caller, owner_id: int) -> bool:
    """Owner or privileged caller."""
    return caller.is_admin or caller.user_id == owner_id


def authorize_view(caller: Caller, owner_id: int) -> None:
    if not can_access(caller, owner_id):
        raise ForbiddenError("view this order")


def authorize_cancel(caller: Caller, owner_id: int) -> None:
    if not can_access(caller, owner_id):
        raise ForbiddenError("cancel this order")


def authorize_approve(caller: Caller) -> None:
    if not caller.is_admin:
        raise ForbiddenError("approve orders")
