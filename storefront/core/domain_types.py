"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ProductId, OrderId, UserId wrap ints — never pass bare ints through domain logic
    - All order states encoded as OrderStatus — no raw string matching
    - Caller is resolved by the external auth gateway and trusted as-is

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and compare against DB strings without converters
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ProductId = NewType("ProductId", int)
OrderId = NewType("OrderId", int)
UserId = NewType("UserId", int)


# ─── Value Types ─────────────────────────────────────────────────

MONEY_QUANTUM = Decimal("0.01")

# Largest value of a 32-bit INTEGER column (ids, stock).
MAX_INT32 = 2_147_483_647

# Per-line quantity cap.
MAX_LINE_QUANTITY = 1_000_000

# Numeric(10, 2) ceiling for unit prices.
MAX_PRICE = Decimal("99999999.99")


# ─── Enums ───────────────────────────────────────────────────────

class OrderStatus(str, Enum):
    """Order lifecycle states — maps to DB `status` column."""
    PENDING = "pending"
    APPROVED = "approved"
    CANCELED = "canceled"


class ProductSortField(str, Enum):
    """The only columns a product listing may be ordered by."""
    CREATED_AT = "created_at"
    NAME = "name"
    PRICE = "price"
    STOCK = "stock"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ─── Value Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class Caller:
    """Authenticated identity handed over by the routing layer."""
    user_id: UserId
    is_admin: bool = False


@dataclass(frozen=True)
class OrderLine:
    """One requested (product, quantity) pair of a placement."""
    product_id: ProductId
    quantity: int


def is_storable_id(value: int) -> bool:
    """True when `value` fits a positive INTEGER key column."""
    return 1 <= value <= MAX_INT32
