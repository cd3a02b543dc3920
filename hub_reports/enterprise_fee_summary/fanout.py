"""
Join/fan-out stage of the enterprise fee summary.

Each order is expanded in three flat-map steps:

    order -> (fee, fee adjustment ids)          join_enterprise_fees
          -> (fee, tax rate | None)              join_tax_rates
          -> (fee, tax rate | None, supplier)    join_suppliers

Every stage takes an immutable sequence and returns a new list; nothing is
mutated.  The extractor is the only collaborator and is read-only.

An order with line items from two suppliers fans out into two tuples that
carry the same fee and tax keys: fee cost is attributed to every supplier
of the order, not split between them.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Sequence
from itertools import chain
from typing import Protocol, TypeVar
from uuid import UUID

from hub_kernel.logging_config import get_logger
from hub_kernel.selectors.adjustment_selector import FeeAdjustmentSet
from hub_kernel.selectors.order_selector import OrderInfo
from hub_reports.enterprise_fee_summary.models import FanoutTuple, FeeJoin, TaxJoin

logger = get_logger("reports.enterprise_fee_summary.fanout")

_In = TypeVar("_In")
_Out = TypeVar("_Out")


class FeeAdjustmentExtractor(Protocol):
    """Read access to the fee and tax adjustments of an order."""

    def enterprise_fee_adjustments(self, order_id: UUID) -> Sequence[FeeAdjustmentSet]: ...

    def tax_rate_ids_for(
        self,
        order_id: UUID,
        adjustment_ids: Collection[UUID],
    ) -> Sequence[UUID]: ...


def _flat_map(fn: Callable[[_In], Iterable[_Out]], items: Iterable[_In]) -> list[_Out]:
    return list(chain.from_iterable(fn(item) for item in items))


def join_enterprise_fees(
    orders: Sequence[OrderInfo],
    extractor: FeeAdjustmentExtractor,
) -> list[FeeJoin]:
    """Expand each order into one FeeJoin per enterprise fee charged on it."""

    def expand(order: OrderInfo) -> list[FeeJoin]:
        return [
            FeeJoin(
                order=order,
                enterprise_fee_id=fee_set.enterprise_fee_id,
                enterprise_fee_adjustment_ids=tuple(fee_set.adjustment_ids),
            )
            for fee_set in extractor.enterprise_fee_adjustments(order.order_id)
        ]

    return _flat_map(expand, orders)


def join_tax_rates(
    fee_joins: Sequence[FeeJoin],
    extractor: FeeAdjustmentExtractor,
) -> list[TaxJoin]:
    """
    Expand each fee join into one TaxJoin per distinct tax rate on the fee.

    A fee with no tax adjustments yields a single TaxJoin with
    ``tax_rate_id=None`` so untaxed fees still reach the report.
    """

    def expand(item: FeeJoin) -> list[TaxJoin]:
        tax_rate_ids: list[UUID | None] = list(
            dict.fromkeys(
                extractor.tax_rate_ids_for(
                    item.order.order_id, item.enterprise_fee_adjustment_ids,
                )
            )
        )
        if not tax_rate_ids:
            tax_rate_ids = [None]
        return [
            TaxJoin(
                order=item.order,
                enterprise_fee_id=item.enterprise_fee_id,
                tax_rate_id=tax_rate_id,
                enterprise_fee_adjustment_ids=item.enterprise_fee_adjustment_ids,
            )
            for tax_rate_id in tax_rate_ids
        ]

    return _flat_map(expand, fee_joins)


def join_suppliers(
    tax_joins: Sequence[TaxJoin],
    supplier_filter: Collection[UUID] | None = None,
) -> list[FanoutTuple]:
    """
    Expand each tax join into one FanoutTuple per distinct line-item supplier.

    Args:
        tax_joins: Output of join_tax_rates.
        supplier_filter: When given and non-empty, only these suppliers fan
            out (the report was filtered by producer).
    """

    def expand(item: TaxJoin) -> list[FanoutTuple]:
        return [
            FanoutTuple(
                order=item.order,
                enterprise_fee_id=item.enterprise_fee_id,
                tax_rate_id=item.tax_rate_id,
                supplier_id=supplier_id,
            )
            for supplier_id in dict.fromkeys(item.order.supplier_ids)
            if not supplier_filter or supplier_id in supplier_filter
        ]

    return _flat_map(expand, tax_joins)


def fan_out(
    orders: Sequence[OrderInfo],
    extractor: FeeAdjustmentExtractor,
    supplier_filter: Collection[UUID] | None = None,
) -> list[FanoutTuple]:
    """
    Run the three join stages over an order set.

    Orders without fee adjustments or without line items contribute no
    tuples.
    """
    fee_joins = join_enterprise_fees(orders, extractor)
    tax_joins = join_tax_rates(fee_joins, extractor)
    tuples = join_suppliers(tax_joins, supplier_filter)

    logger.info(
        "fee_fanout_completed",
        extra={
            "order_count": len(orders),
            "fee_join_count": len(fee_joins),
            "tax_join_count": len(tax_joins),
            "tuple_count": len(tuples),
        },
    )
    return tuples
