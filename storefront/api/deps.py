"""Request Dependencies — caller identity and service construction per request.

Invariants:
    - Caller identity comes only from the trusted auth-gateway headers
      (X-User-Id, X-User-Admin); credentials are never verified here
    - Missing or malformed X-User-Id -> AuthenticationRequiredError (401); only ASCII
      digits within the INTEGER key range are accepted
    - Services are built per request around the injected storage handle
"""

from fastapi import Depends, Header

from storefront.config import get_settings
from storefront.core.domain_types import Caller, UserId, is_storable_id
from storefront.core.errors import AuthenticationRequiredError, ForbiddenError
from storefront.infrastructure.database import DatabaseSessionManager, get_storage
from storefront.services.order_queries import OrderQueries
from storefront.services.order_transitions import OrderTransitions
from storefront.services.place_order import OrderPlacement
from storefront.services.product_catalog import ProductCatalog

_TRUTHY = frozenset({"1", "true", "yes"})


def _parse_user_id(raw: str | None) -> int | None:
    if not raw or len(raw) > 10 or not raw.isascii() or not raw.isdigit():
        return None
    user_id = int(raw)
    return user_id if is_storable_id(user_id) else None


def get_caller(
    x_user_id: str | None = Header(None),
    x_user_admin: str | None = Header(None),
) -> Caller:
    """Caller resolved by the upstream auth gateway."""
    user_id = _parse_user_id(x_user_id)
    if user_id is None:
        raise AuthenticationRequiredError()
    return Caller(
        user_id=UserId(user_id),
        is_admin=(x_user_admin or "").strip().lower() in _TRUTHY,
    )


def require_admin(caller: Caller = Depends(get_caller)) -> Caller:
    if not caller.is_admin:
        raise ForbiddenError("perform this action (admins only)")
    return caller


def get_order_placement(
    storage: DatabaseSessionManager = Depends(get_storage),
) -> OrderPlacement:
    return OrderPlacement(storage, max_items=get_settings().order_max_items)


def get_order_transitions(
    storage: DatabaseSessionManager = Depends(get_storage),
) -> OrderTransitions:
    return OrderTransitions(storage)


def get_order_queries(
    storage: DatabaseSessionManager = Depends(get_storage),
) -> OrderQueries:
    return OrderQueries(storage)


def get_product_catalog(
    storage: DatabaseSessionManager = Depends(get_storage),
) -> ProductCatalog:
    return ProductCatalog(storage)
