"""
Module: hub_kernel.models.enterprise
Responsibility: ORM persistence for enterprises -- producers, hubs and shops.
    A single enterprise may act as a supplier on line items, as the
    distributor of an order, and as the owner of enterprise fees.
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from hub_kernel.db.base import Base


class Enterprise(Base):
    """
    Marketplace participant.

    Guarantees:
        - name is always present.
        - charges_sales_tax records whether the producer is registered for
          sales tax; reports surface it as the producer tax status.
    """

    __tablename__ = "enterprises"

    __table_args__ = (
        Index("idx_enterprise_name", "name"),
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    charges_sales_tax: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Enterprise {self.name}>"
