"""
Module: hub_kernel.models.order_cycle
Responsibility: ORM persistence for order cycles -- the time-boxed trading
    windows that link suppliers to distributors.
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from hub_kernel.db.base import Base


class OrderCycle(Base):
    """
    Trading window.

    Reports order order-cycle groups by ``orders_open_at``; a cycle with no
    open date sorts after dated cycles.
    """

    __tablename__ = "order_cycles"

    __table_args__ = (
        Index("idx_order_cycle_open", "orders_open_at"),
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    orders_open_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    orders_close_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<OrderCycle {self.name}>"
