"""Order Schemas — placement request and order responses.

Invariants:
    - OrderItemIn: product_id in 1..MAX_INT32, quantity in 1..MAX_LINE_QUANTITY
    - Emptiness and the line cap of OrderCreate.items are enforced by the service
    - Money serialized as strings with 2 fractional digits (no float rounding)
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from storefront.core.domain_types import MAX_INT32, MAX_LINE_QUANTITY, OrderStatus


class OrderItemIn(BaseModel):
    product_id: int = Field(ge=1, le=MAX_INT32)
    quantity: int = Field(ge=1, le=MAX_LINE_QUANTITY)


class OrderCreate(BaseModel):
    """Placement request — a non-empty, ordered list of (product, quantity)."""
    items: list[OrderItemIn]


class OrderPlaced(BaseModel):
    message: str = "Order placed successfully"
    order_id: int
    total_amount: Decimal

    @field_serializer("total_amount")
    def serialize_total(self, v: Decimal) -> str:
        return f"{v:.2f}"


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    quantity: int
    price: Decimal

    @field_serializer("price")
    def serialize_price(self, v: Decimal) -> str:
        return f"{v:.2f}"


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    total_amount: Decimal
    status: OrderStatus
    created_at: datetime

    @field_serializer("total_amount")
    def serialize_total(self, v: Decimal) -> str:
        return f"{v:.2f}"


class OrderDetail(BaseModel):
    order: OrderOut
    items: list[OrderItemOut]


class OrderHistory(BaseModel):
    orders: list[OrderOut]
    pagination: dict[str, int]


class OrderTransitioned(BaseModel):
    message: str
    order_id: int
    status: OrderStatus
