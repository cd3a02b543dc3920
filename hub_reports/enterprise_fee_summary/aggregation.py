"""
Grouping and aggregation stage of the enterprise fee summary.

Fan-out tuples are grouped by GroupKey.  Totals are never folded from
in-memory amounts: each group (and each summary level) asks the adjustment
ledger for exact decimal sums over its distinct order ids, so the order of
tuples inside a group cannot change a total and summary rows never
accumulate rounding from their children.

Formulas, for a set of orders O:

    fee_adjustments = enterprise-fee adjustments of O (for the fee, on a
                      detail row; for every fee, on a summary row)
    total_excl_tax  = sum(fee_adjustments) - sum(included tax on fee_adjustments)
    tax             = sum(tax on fee_adjustments) (of the row's tax rate on
                      a detail row; zero when the row has no tax rate)
    total_incl_tax  = total_excl_tax + tax
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Collection, Sequence
from decimal import Decimal
from typing import Protocol
from uuid import UUID

from hub_kernel.logging_config import get_logger
from hub_kernel.models.adjustment import AdjustmentKind
from hub_kernel.selectors.order_selector import OrderInfo
from hub_reports.enterprise_fee_summary.models import (
    ZERO,
    FanoutTuple,
    FeeGroup,
    FeeTotals,
    GroupKey,
)

logger = get_logger("reports.enterprise_fee_summary.aggregation")


class AdjustmentLedger(Protocol):
    """Read-only sums over the adjustment ledger."""

    def amount_sum(
        self,
        kind: AdjustmentKind,
        order_ids: Collection[UUID],
        originator_id: UUID | None = None,
        adjustable_ids: Collection[UUID] | None = None,
        included: bool | None = None,
    ) -> Decimal: ...

    def enterprise_fee_adjustment_ids(
        self,
        order_ids: Collection[UUID],
        enterprise_fee_id: UUID | None = None,
    ) -> Sequence[UUID]: ...


def group_tuples(tuples: Sequence[FanoutTuple]) -> dict[GroupKey, FeeGroup]:
    """
    Group fan-out tuples by their GroupKey.

    The set of keys depends only on the tuples, not on their order.
    """
    buckets: dict[GroupKey, list[OrderInfo]] = defaultdict(list)
    for item in tuples:
        buckets[item.group_key].append(item.order)
    return {
        key: FeeGroup(key=key, orders=tuple(orders))
        for key, orders in buckets.items()
    }


class FeeAggregator:
    """
    Computes report totals from the adjustment ledger.

    Contract:
        Every total is a function of a set of order ids and the ledger state;
        duplicated orders inside a group are collapsed before querying.
    """

    def __init__(self, ledger: AdjustmentLedger):
        self._ledger = ledger

    def _included_tax(
        self,
        order_ids: Collection[UUID],
        fee_adjustment_ids: Collection[UUID],
    ) -> Decimal:
        return self._ledger.amount_sum(
            AdjustmentKind.TAX,
            order_ids,
            adjustable_ids=fee_adjustment_ids,
            included=True,
        )

    def totals_for_group(self, group: FeeGroup) -> FeeTotals:
        """Totals of one detail row."""
        key = group.key
        order_ids = group.order_ids
        if not order_ids:
            return FeeTotals.zero()

        fee_adjustment_ids = self._ledger.enterprise_fee_adjustment_ids(
            order_ids, key.enterprise_fee_id,
        )
        fee_amount = self._ledger.amount_sum(
            AdjustmentKind.ENTERPRISE_FEE,
            order_ids,
            originator_id=key.enterprise_fee_id,
        )
        total_excl_tax = fee_amount - self._included_tax(order_ids, fee_adjustment_ids)

        tax = ZERO
        if key.tax_rate_id is not None:
            tax = self._ledger.amount_sum(
                AdjustmentKind.TAX,
                order_ids,
                originator_id=key.tax_rate_id,
                adjustable_ids=fee_adjustment_ids,
            )

        return FeeTotals.of(total_excl_tax, tax)

    def totals_for_orders(self, order_ids: Collection[UUID]) -> FeeTotals:
        """
        Totals of a summary row: every fee and every tax rate on the orders.

        Called with the union of the order ids of all rows under a grouping
        level.
        """
        order_ids = tuple(dict.fromkeys(order_ids))
        if not order_ids:
            return FeeTotals.zero()

        fee_adjustment_ids = self._ledger.enterprise_fee_adjustment_ids(order_ids)
        fee_amount = self._ledger.amount_sum(
            AdjustmentKind.ENTERPRISE_FEE, order_ids,
        )
        total_excl_tax = fee_amount - self._included_tax(order_ids, fee_adjustment_ids)
        tax = self._ledger.amount_sum(
            AdjustmentKind.TAX,
            order_ids,
            adjustable_ids=fee_adjustment_ids,
        )

        logger.debug(
            "fee_summary_totals_computed",
            extra={"order_count": len(order_ids), "tax": tax},
        )
        return FeeTotals.of(total_excl_tax, tax)
