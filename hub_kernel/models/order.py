"""
Module: hub_kernel.models.order
Responsibility: ORM persistence for customer orders and their line items.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Every line item references the supplier (producer) of its product.
    - ``all_adjustments`` covers every adjustment carrying this order id,
      whether it was charged against the order, a line item, or another
      adjustment.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hub_kernel.db.base import Base, UUIDString

if TYPE_CHECKING:
    from hub_kernel.models.adjustment import Adjustment


class OrderState(str, Enum):
    """Checkout state of an order."""

    CART = "cart"
    PAYMENT = "payment"
    COMPLETE = "complete"
    CANCELED = "canceled"
    RETURNED = "returned"


class Order(Base):
    """
    Customer order placed with a distributor within an order cycle.

    Non-goals:
        - Checkout state transitions; reports only read completed orders.
    """

    __tablename__ = "orders"

    __table_args__ = (
        Index("idx_order_completed_at", "completed_at"),
        Index("idx_order_distributor", "distributor_id"),
        Index("idx_order_order_cycle", "order_cycle_id"),
    )

    number: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
    )

    state: Mapped[str] = mapped_column(
        String(20),
        default=OrderState.CART.value,
        nullable=False,
    )

    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    distributor_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("enterprises.id"),
        nullable=True,
    )

    order_cycle_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("order_cycles.id"),
        nullable=True,
    )

    line_items: Mapped[list["LineItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="LineItem.position",
    )

    all_adjustments: Mapped[list["Adjustment"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Order {self.number} state={self.state}>"


class LineItem(Base):
    """A quantity of one supplier's product within an order."""

    __tablename__ = "line_items"

    __table_args__ = (
        Index("idx_line_item_order", "order_id"),
        Index("idx_line_item_supplier", "supplier_id"),
    )

    order_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("orders.id"),
        nullable=False,
    )

    supplier_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("enterprises.id"),
        nullable=False,
    )

    # Insertion order within the order; keeps supplier fan-out deterministic
    position: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        default=1,
        nullable=False,
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        default=Decimal("0"),
        nullable=False,
    )

    order: Mapped[Order] = relationship(back_populates="line_items")

    def __repr__(self) -> str:
        return f"<LineItem {self.id} supplier={self.supplier_id}>"