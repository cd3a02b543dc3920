"""
Module: hub_kernel.models.tax
Responsibility: ORM persistence for tax categories and tax rates.  Taxing a
    fee adjustment produces a ``tax`` adjustment whose originator is the rate
    and whose adjustable is the fee adjustment.
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hub_kernel.db.base import Base, UUIDString


class TaxCategory(Base):
    """Named group of tax rates (e.g. "GST", "Fees")."""

    __tablename__ = "tax_categories"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<TaxCategory {self.name}>"


class TaxRate(Base):
    """
    Tax definition.

    ``amount`` is the rate as a fraction (0.1 is 10%).
    """

    __tablename__ = "tax_rates"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(8, 5),
        nullable=False,
    )

    included_in_price: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    tax_category_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("tax_categories.id"),
        nullable=True,
    )

    tax_category: Mapped[TaxCategory | None] = relationship(lazy="joined")

    def __repr__(self) -> str:
        return f"<TaxRate {self.name} {self.amount}>"
