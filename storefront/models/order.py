"""Order ORM — the Order Ledger aggregate root.

Invariants:
    - total_amount is written once at placement and never updated
    - status transitions: pending -> approved | canceled (core/order_lifecycle.py)
    - deleted_at is set together with status=canceled (soft delete); rows are never deleted
    - owns its OrderItems (cascade all, delete-orphan)
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.db.base import Base


class Order(Base):
    """Placed order — a price snapshot of the requested items."""
    __tablename__ = "orders"
    __table_args__ = (
        Index("ix_orders_user_id_created_at", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(20, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem", back_populates="order",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="OrderItem.id",
    )
