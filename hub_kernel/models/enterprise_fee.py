"""
Module: hub_kernel.models.enterprise_fee
Responsibility: ORM persistence for enterprise fee definitions.  Applying a
    fee to an order produces ``enterprise_fee`` adjustments whose originator
    is the fee.
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from enum import Enum
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hub_kernel.db.base import Base, UUIDString
from hub_kernel.models.enterprise import Enterprise


class FeeType(str, Enum):
    """Kinds of enterprise fee."""

    ADMIN = "admin"
    PACKING = "packing"
    TRANSPORT = "transport"
    FUNDRAISING = "fundraising"
    SALES = "sales"


class EnterpriseFee(Base):
    """
    Surcharge an enterprise applies to orders or line items.

    Non-goals:
        - Fee calculation (flat rate, per item, percentage) is not modelled;
          reports only read the adjustments a fee has already produced.
    """

    __tablename__ = "enterprise_fees"

    __table_args__ = (
        Index("idx_enterprise_fee_owner", "enterprise_id"),
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    fee_type: Mapped[str] = mapped_column(
        String(20),
        default=FeeType.ADMIN.value,
        nullable=False,
    )

    enterprise_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("enterprises.id"),
        nullable=False,
    )

    tax_category_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("tax_categories.id"),
        nullable=True,
    )

    enterprise: Mapped[Enterprise] = relationship(lazy="joined")

    def __repr__(self) -> str:
        return f"<EnterpriseFee {self.name} ({self.fee_type})>"
