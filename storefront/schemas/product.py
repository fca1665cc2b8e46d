"""Product Schemas — product-management payloads and listing responses.

Invariants:
    - ProductIn.name: 1-255 chars, stripped, non-empty
    - price/stock ranges re-checked by core.inventory.validate_product_fields
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from storefront.core.domain_types import MAX_INT32


class ProductIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(None, max_length=10_000)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    stock: int = Field(ge=0, le=MAX_INT32)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    price: Decimal
    stock: int
    created_at: datetime
    updated_at: datetime | None = None

    @field_serializer("price")
    def serialize_price(self, v: Decimal) -> str:
        return f"{v:.2f}"


class ProductList(BaseModel):
    products: list[ProductOut]
    pagination: dict[str, int]


class ProductDeleted(BaseModel):
    message: str = "Product deleted successfully"
    product_id: int
