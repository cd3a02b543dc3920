"""
Column projection for the enterprise fee summary.

Maps a FeeGroup and its totals to a flat ReportRow.  Every lookup is a point
read keyed by an id embedded in the GroupKey; a missing id (a deleted fee, a
fee without tax) yields ``None`` fields instead of failing the row.

ZERO I/O beyond the injected lookup.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Protocol
from uuid import UUID

from hub_kernel.db.types import round_money
from hub_kernel.selectors.reference_selector import (
    EnterpriseFeeInfo,
    EnterpriseInfo,
    OrderCycleInfo,
    TaxRateInfo,
)
from hub_reports.enterprise_fee_summary.models import (
    EnterpriseFeeReport,
    FeeGroup,
    FeeTotals,
    ReportRow,
)

# Output columns, in presentation order
COLUMNS: tuple[str, ...] = (
    "distributor",
    "producer",
    "producer_tax_status",
    "order_cycle",
    "enterprise_fee_name",
    "enterprise_fee_type",
    "enterprise_fee_owner",
    "tax_category",
    "tax_rate_name",
    "tax_rate",
    "total_excl_tax",
    "tax",
    "total_incl_tax",
)

MONEY_COLUMNS: frozenset[str] = frozenset({"total_excl_tax", "tax", "total_incl_tax"})


class ReferenceLookup(Protocol):
    """Point reads of reference data by id; None when absent."""

    def enterprise(self, enterprise_id: UUID | None) -> EnterpriseInfo | None: ...

    def order_cycle(self, order_cycle_id: UUID | None) -> OrderCycleInfo | None: ...

    def enterprise_fee(self, enterprise_fee_id: UUID | None) -> EnterpriseFeeInfo | None: ...

    def tax_rate(self, tax_rate_id: UUID | None) -> TaxRateInfo | None: ...


def project_row(
    group: FeeGroup,
    totals: FeeTotals,
    lookup: ReferenceLookup,
) -> ReportRow:
    """Project one group onto the report columns."""
    key = group.key
    distributor = lookup.enterprise(key.distributor_id)
    producer = lookup.enterprise(key.supplier_id)
    order_cycle = lookup.order_cycle(key.order_cycle_id)
    fee = lookup.enterprise_fee(key.enterprise_fee_id)
    tax_rate = lookup.tax_rate(key.tax_rate_id)

    return ReportRow(
        distributor=distributor.name if distributor else None,
        producer=producer.name if producer else None,
        producer_tax_status=producer.charges_sales_tax if producer else None,
        order_cycle=order_cycle.name if order_cycle else None,
        enterprise_fee_name=fee.name if fee else None,
        enterprise_fee_type=fee.fee_type if fee else None,
        enterprise_fee_owner=fee.owner_name if fee else None,
        tax_category=tax_rate.tax_category_name if tax_rate else None,
        tax_rate_name=tax_rate.name if tax_rate else None,
        tax_rate=tax_rate.amount if tax_rate else None,
        total_excl_tax=totals.total_excl_tax,
        tax=totals.tax,
        total_incl_tax=totals.total_incl_tax,
        group_key=key,
        order_ids=group.order_ids,
        order_cycle_opens_at=order_cycle.orders_open_at if order_cycle else None,
    )


def _render_value(column: str, value: Any, precision: int) -> Any:
    if value is None:
        return None
    if column in MONEY_COLUMNS:
        return str(round_money(value, precision))
    if isinstance(value, Decimal):
        return str(value.normalize())
    return value


def render_row(row: ReportRow, precision: int = 2) -> dict[str, Any]:
    """Convert a row to a plain dict keyed by column name."""
    rendered = {
        column: _render_value(column, getattr(row, column), precision)
        for column in COLUMNS
    }
    rendered["summary_level"] = row.summary_level.value if row.summary_level else None
    return rendered


def render_to_dict(report: EnterpriseFeeReport, precision: int = 2) -> dict[str, Any]:
    """
    Convert a report to plain dicts for table and CSV renderers.

    Money is rounded to ``precision`` places at this point only; the report
    itself keeps unrounded sums.
    """
    meta = report.metadata
    return {
        "metadata": {
            "report_type": meta.report_type,
            "entity_name": meta.entity_name,
            "currency": meta.currency,
            "generated_at": meta.generated_at,
            "parameters": dict(meta.parameters),
        },
        "columns": list(COLUMNS),
        "rows": [render_row(row, precision) for row in report.rows],
    }
