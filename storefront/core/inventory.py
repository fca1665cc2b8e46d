"""Inventory Consistency — pure stock predicates and the shared product-field guard.

Invariants:
    - is_orderable is PURE: decides from (stock, quantity) alone, never reads storage
    - Stock never goes negative: every decrement is checked against this predicate first
    - validate_product_fields is the single guard for product-management writes
    - Totals are quantized to MONEY_QUANTUM (2 decimal places)
    - Ids, quantities, prices and stock are bounded to what their columns can hold
"""

from collections.abc import Iterable
from decimal import Decimal, ROUND_HALF_UP

from storefront.core.domain_types import (
    MAX_INT32, MAX_LINE_QUANTITY, MAX_PRICE, MONEY_QUANTUM, OrderLine, ProductId,
    is_storable_id,
)
from storefront.core.errors import EmptyItemListError, ValidationError


def is_orderable(stock: int, quantity: int) -> bool:
    """True when `quantity` units can be taken from `stock`."""
    return quantity >= 1 and stock >= 0 and quantity <= stock


def line_total(price: Decimal, quantity: int) -> Decimal:
    return price * quantity


def order_total(lines: Iterable[tuple[Decimal, int]]) -> Decimal:
    """Sum of price × quantity over snapshot (price, quantity) pairs."""
    total = sum(
        (line_total(price, quantity) for price, quantity in lines),
        Decimal("0"),
    )
    return total.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def validate_order_lines(lines: list[OrderLine], max_items: int) -> None:
    """Shape check for a placement request. Runs before any storage access."""
    if not lines:
        raise EmptyItemListError()
    if len(lines) > max_items:
        raise ValidationError(
            f"Order may contain at most {max_items} items.", "items",
        )
    for index, line in enumerate(lines):
        if not is_storable_id(line.product_id):
            raise ValidationError(
                f"Item {index} has an invalid product_id.",
                f"items.{index}.product_id",
            )
        if not 1 <= line.quantity <= MAX_LINE_QUANTITY:
            raise ValidationError(
                f"Item {index} must have a quantity between 1 and {MAX_LINE_QUANTITY}.",
                f"items.{index}.quantity",
            )


def cumulative_quantities(lines: list[OrderLine]) -> dict[ProductId, int]:
    """Total requested quantity per product across repeated lines."""
    totals: dict[ProductId, int] = {}
    for line in lines:
        totals[line.product_id] = totals.get(line.product_id, 0) + line.quantity
    return totals


def validate_product_fields(price: Decimal, stock: int) -> None:
    """Product-management guard: price must be positive, stock non-negative."""
    if price <= 0:
        raise ValidationError("Price must be positive.", "price")
    if price > MAX_PRICE:
        raise ValidationError(f"Price must not exceed {MAX_PRICE}.", "price")
    if price != price.quantize(MONEY_QUANTUM):
        raise ValidationError(
            "Price must have at most 2 decimal places.", "price",
        )
    if not 0 <= stock <= MAX_INT32:
        raise ValidationError(
            f"Stock must be between 0 and {MAX_INT32}.", "stock",
        )
