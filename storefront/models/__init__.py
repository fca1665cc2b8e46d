"""ORM Models — SQLAlchemy declarative models for products, orders and order items.

Invariants:
    - All models inherit from Base (db/base.py)
    - Order is the aggregate root of the ledger; OrderItem has no independent lifecycle

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from storefront.models.product import Product  # noqa: F401
from storefront.models.order import Order  # noqa: F401
from storefront.models.order_item import OrderItem  # noqa: F401
