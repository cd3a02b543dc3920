"""
Module: hub_kernel.models.adjustment
Responsibility: ORM persistence for adjustments -- the monetary deltas that
    fees and taxes apply to an order.  Adjustments are the ledger that fee
    reports sum over.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - ``order_id`` is always the order the delta belongs to, even when the
      adjustable is a line item or another adjustment.
    - A tax on a fee is a ``tax`` adjustment whose adjustable is the fee
      adjustment (adjustable_type ``adjustment``).
    - ``included`` marks tax already embedded in the adjustable's amount.
"""

from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hub_kernel.db.base import Base, UUIDString
from hub_kernel.models.order import Order


class AdjustmentKind(str, Enum):
    """What produced the adjustment (the originator's type)."""

    ENTERPRISE_FEE = "enterprise_fee"
    TAX = "tax"


class AdjustableType(str, Enum):
    """What the adjustment is charged against."""

    ORDER = "order"
    LINE_ITEM = "line_item"
    ADJUSTMENT = "adjustment"


class Adjustment(Base):
    """
    Monetary delta attached to an order.

    Non-goals:
        - ``originator_id`` is a polymorphic reference (fee or tax rate,
          selected by ``kind``) and carries no foreign key; the originator may
          have been deleted since the adjustment was created.
    """

    __tablename__ = "adjustments"

    __table_args__ = (
        Index("idx_adjustment_order_kind", "order_id", "kind"),
        Index("idx_adjustment_originator", "kind", "originator_id"),
        Index("idx_adjustment_adjustable", "adjustable_type", "adjustable_id"),
    )

    order_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("orders.id"),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
    )

    kind: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    originator_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        nullable=True,
    )

    adjustable_type: Mapped[str] = mapped_column(
        String(20),
        default=AdjustableType.ORDER.value,
        nullable=False,
    )

    adjustable_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        nullable=True,
    )

    included: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    label: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    order: Mapped[Order] = relationship(back_populates="all_adjustments")

    def __repr__(self) -> str:
        return f"<Adjustment {self.kind} {self.amount} order={self.order_id}>"