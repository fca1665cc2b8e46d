"""Service test fixtures — services wired to the in-memory test storage.

Invariants:
    - Services receive the storage fixture at construction, exactly as the API wires them
    - Caller fixtures: owner (user 1), stranger (user 2), admin (user 99)
"""

import pytest

from storefront.core.domain_types import Caller, UserId
from storefront.services.order_queries import OrderQueries
from storefront.services.order_transitions import OrderTransitions
from storefront.services.place_order import OrderPlacement
from storefront.services.product_catalog import ProductCatalog
from tests.services.order_lines import lines


@pytest.fixture
def owner():
    return Caller(user_id=UserId(1))


@pytest.fixture
def stranger():
    return Caller(user_id=UserId(2))


@pytest.fixture
def admin():
    return Caller(user_id=UserId(99), is_admin=True)


@pytest.fixture
def placement(storage):
    return OrderPlacement(storage)


@pytest.fixture
def transitions(storage):
    return OrderTransitions(storage)


@pytest.fixture
def queries(storage):
    return OrderQueries(storage)


@pytest.fixture
def catalog(storage):
    return ProductCatalog(storage)


@pytest.fixture
def place_pending(placement, make_product, owner):
    """Place a one-line order for the owner and return its id."""

    async def _place(quantity: int = 1, stock: int = 5) -> int:
        product_id = await make_product(stock=stock)
        result = await placement.place(owner.user_id, lines((product_id, quantity)))
        return result.order_id

    return _place
