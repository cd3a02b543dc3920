"""
Enterprise Fee Summary Domain Models (``hub_reports.enterprise_fee_summary.models``).

Responsibility
--------------
Frozen dataclass value objects flowing through the fee/tax aggregation
pipeline: the fan-out tuples produced by each join stage, the composite
group key, per-group monetary totals, and the projected report rows.

Architecture position
---------------------
**Reports layer** -- pure data definitions with ZERO I/O.  Consumed by the
fan-out, aggregation, projection and hierarchy stages and returned to callers
by ``EnterpriseFeeReportService``.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* ``FeeTotals.of`` derives ``total_incl_tax`` from its parts, so
  ``total_excl_tax + tax == total_incl_tax`` holds exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from hub_kernel.selectors.order_selector import OrderInfo

ZERO = Decimal("0")


# =========================================================================
# Enums
# =========================================================================


class SummaryLevel(str, Enum):
    """Grouping levels of the report, outermost first."""

    DISTRIBUTOR = "distributor"
    PRODUCER = "producer"
    ORDER_CYCLE = "order_cycle"


SUMMARY_LEVEL_ORDER: tuple[SummaryLevel, ...] = (
    SummaryLevel.DISTRIBUTOR,
    SummaryLevel.PRODUCER,
    SummaryLevel.ORDER_CYCLE,
)

REPORT_TYPE = "enterprise_fees_with_tax_report_by_producer"


# =========================================================================
# Fan-out tuples
# =========================================================================


@dataclass(frozen=True)
class FeeJoin:
    """An order joined to one enterprise fee it was charged."""

    order: OrderInfo
    enterprise_fee_id: UUID
    enterprise_fee_adjustment_ids: tuple[UUID, ...]


@dataclass(frozen=True)
class TaxJoin:
    """A fee join expanded by one tax rate (None when the fee is untaxed)."""

    order: OrderInfo
    enterprise_fee_id: UUID
    tax_rate_id: UUID | None
    enterprise_fee_adjustment_ids: tuple[UUID, ...]


@dataclass(frozen=True)
class GroupKey:
    """Identifies one detail row of the report."""

    tax_rate_id: UUID | None
    enterprise_fee_id: UUID
    supplier_id: UUID
    distributor_id: UUID | None
    order_cycle_id: UUID | None


@dataclass(frozen=True)
class FanoutTuple:
    """A tax join expanded by one supplier of the order's line items."""

    order: OrderInfo
    enterprise_fee_id: UUID
    tax_rate_id: UUID | None
    supplier_id: UUID

    @property
    def group_key(self) -> GroupKey:
        return GroupKey(
            tax_rate_id=self.tax_rate_id,
            enterprise_fee_id=self.enterprise_fee_id,
            supplier_id=self.supplier_id,
            distributor_id=self.order.distributor_id,
            order_cycle_id=self.order.order_cycle_id,
        )


@dataclass(frozen=True)
class FeeGroup:
    """
    All fan-out tuples sharing a GroupKey.

    ``orders`` may repeat an order when the fan-out produced several tuples
    for it; totals always use ``order_ids``, which is distinct.
    """

    key: GroupKey
    orders: tuple[OrderInfo, ...]

    @property
    def order_ids(self) -> tuple[UUID, ...]:
        """Distinct order ids in first-seen order."""
        return tuple(dict.fromkeys(order.order_id for order in self.orders))


# =========================================================================
# Totals and rows
# =========================================================================


@dataclass(frozen=True)
class FeeTotals:
    """Monetary totals of one report row."""

    total_excl_tax: Decimal
    tax: Decimal
    total_incl_tax: Decimal

    @classmethod
    def of(cls, total_excl_tax: Decimal, tax: Decimal) -> FeeTotals:
        """Build totals with total_incl_tax derived from its parts."""
        return cls(
            total_excl_tax=total_excl_tax,
            tax=tax,
            total_incl_tax=total_excl_tax + tax,
        )

    @classmethod
    def zero(cls) -> FeeTotals:
        return cls.of(ZERO, ZERO)


@dataclass(frozen=True)
class ReportRow:
    """
    One projected report row.

    Detail rows carry their ``group_key``; summary rows carry the level they
    summarise and only the grouping columns of that level.  ``order_ids`` are
    the distinct orders behind the row's totals.
    """

    distributor: str | None = None
    producer: str | None = None
    producer_tax_status: bool | None = None
    order_cycle: str | None = None
    enterprise_fee_name: str | None = None
    enterprise_fee_type: str | None = None
    enterprise_fee_owner: str | None = None
    tax_category: str | None = None
    tax_rate_name: str | None = None
    tax_rate: Decimal | None = None
    total_excl_tax: Decimal = ZERO
    tax: Decimal = ZERO
    total_incl_tax: Decimal = ZERO
    # Hierarchy and provenance (not output columns)
    summary_level: SummaryLevel | None = None
    group_key: GroupKey | None = None
    order_ids: tuple[UUID, ...] = ()
    order_cycle_opens_at: datetime | None = None

    @property
    def is_summary(self) -> bool:
        return self.summary_level is not None

    @property
    def totals(self) -> FeeTotals:
        return FeeTotals(
            total_excl_tax=self.total_excl_tax,
            tax=self.tax,
            total_incl_tax=self.total_incl_tax,
        )


# =========================================================================
# Report
# =========================================================================


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to every generated report."""

    report_type: str
    entity_name: str
    currency: str
    generated_at: str  # ISO format timestamp from injected clock
    parameters: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class EnterpriseFeeReport:
    """Ordered report rows with the summary hierarchy inline."""

    metadata: ReportMetadata
    rows: tuple[ReportRow, ...]

    @property
    def detail_rows(self) -> tuple[ReportRow, ...]:
        return tuple(row for row in self.rows if not row.is_summary)

    def summary_rows(self, level: SummaryLevel | None = None) -> tuple[ReportRow, ...]:
        """Summary rows, optionally restricted to one level."""
        return tuple(
            row
            for row in self.rows
            if row.is_summary and (level is None or row.summary_level == level)
        )

    @property
    def is_empty(self) -> bool:
        return not self.rows
