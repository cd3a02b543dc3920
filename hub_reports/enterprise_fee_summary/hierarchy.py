"""
Report hierarchy: ordering of detail rows and insertion of summary rows.

Rows nest distributor -> producer -> order cycle.  Detail rows are sorted by
distributor name, producer name and order-cycle start date (then order-cycle
name, fee name and tax rate name); missing values sort last and ids break
ties so each group is contiguous.  After the rows of a group at a summarised
level comes one summary row whose totals are recomputed from the union of
the group's order ids.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Sequence
from datetime import datetime
from itertools import groupby
from typing import Any
from uuid import UUID

from hub_reports.enterprise_fee_summary.models import (
    SUMMARY_LEVEL_ORDER,
    FeeTotals,
    ReportRow,
    SummaryLevel,
)

SummaryTotals = Callable[[tuple[UUID, ...]], FeeTotals]


def _nulls_last(value: Any) -> tuple[bool, Any]:
    return (value is None, "" if value is None else value)


def _opens_at_key(value: datetime | None) -> tuple[bool, float]:
    return (value is None, value.timestamp() if value is not None else 0.0)


def _id(value: UUID | None) -> str:
    return "" if value is None else str(value)


def _level_key(row: ReportRow, level: SummaryLevel) -> tuple[str, ...]:
    key = row.group_key
    if key is None:
        return ()
    parts = [_id(key.distributor_id)]
    if level in (SummaryLevel.PRODUCER, SummaryLevel.ORDER_CYCLE):
        parts.append(_id(key.supplier_id))
    if level == SummaryLevel.ORDER_CYCLE:
        parts.append(_id(key.order_cycle_id))
    return tuple(parts)


def detail_sort_key(row: ReportRow) -> tuple:
    """Sort key of a detail row."""
    key = row.group_key
    return (
        _nulls_last(row.distributor),
        _id(key.distributor_id if key else None),
        _nulls_last(row.producer),
        _id(key.supplier_id if key else None),
        _opens_at_key(row.order_cycle_opens_at),
        _nulls_last(row.order_cycle),
        _id(key.order_cycle_id if key else None),
        _nulls_last(row.enterprise_fee_name),
        _id(key.enterprise_fee_id if key else None),
        _nulls_last(row.tax_rate_name),
        _id(key.tax_rate_id if key else None),
    )


def summary_row(
    level: SummaryLevel,
    anchor: ReportRow,
    totals: FeeTotals,
    order_ids: tuple[UUID, ...],
) -> ReportRow:
    """Summary row for a group, carrying the grouping columns of its level."""
    depth = SUMMARY_LEVEL_ORDER.index(level)
    return ReportRow(
        distributor=anchor.distributor,
        producer=anchor.producer if depth >= 1 else None,
        producer_tax_status=anchor.producer_tax_status if depth >= 1 else None,
        order_cycle=anchor.order_cycle if depth >= 2 else None,
        total_excl_tax=totals.total_excl_tax,
        tax=totals.tax,
        total_incl_tax=totals.total_incl_tax,
        summary_level=level,
        order_ids=order_ids,
        order_cycle_opens_at=anchor.order_cycle_opens_at if depth >= 2 else None,
    )


def build_report_rows(
    rows: Sequence[ReportRow],
    summary_totals: SummaryTotals,
    levels: Collection[SummaryLevel] = SUMMARY_LEVEL_ORDER,
) -> tuple[ReportRow, ...]:
    """
    Order detail rows and interleave summary rows.

    Args:
        rows: Detail rows (any order).
        summary_totals: Computes totals for a union of order ids.
        levels: Levels that receive a summary row.

    Returns:
        Detail and summary rows in presentation order.
    """
    ordered = sorted(rows, key=detail_sort_key)
    out: list[ReportRow] = []

    def emit(group_rows: list[ReportRow], depth: int) -> None:
        level = SUMMARY_LEVEL_ORDER[depth]
        for _, members in groupby(group_rows, key=lambda r: _level_key(r, level)):
            members = list(members)
            if depth + 1 < len(SUMMARY_LEVEL_ORDER):
                emit(members, depth + 1)
            else:
                out.extend(members)
            if level in levels:
                order_ids = tuple(
                    dict.fromkeys(oid for row in members for oid in row.order_ids)
                )
                out.append(
                    summary_row(level, members[0], summary_totals(order_ids), order_ids)
                )

    if ordered:
        emit(ordered, 0)
    return tuple(out)
