"""
Module: hub_kernel.selectors.adjustment_selector
Responsibility: Read-only queries over the adjustment ledger -- extracting the
    enterprise-fee adjustments of an order, the tax rates charged on them, and
    exact decimal sums of adjustment amounts.
Architecture position: Kernel > Selectors.  May import from models/ and
    selectors/base.py.  MUST NOT import from domain/ or outer layers.

Invariants enforced:
    - All sums are computed in SQL over the stored Numeric amounts and
      returned as Decimal; a sum over no rows is Decimal("0"), never None.
    - Results are ordered deterministically (originator id, then adjustment
      id) so repeated runs see identical sequences.

Failure modes:
    - Database errors propagate unmodified; there is no retry here.
    - Adjustments without an originator id are ignored by every read.
"""

from collections import defaultdict
from collections.abc import Collection
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hub_kernel.db.types import ZERO, coalesce_amount
from hub_kernel.logging_config import get_logger
from hub_kernel.models.adjustment import AdjustableType, Adjustment, AdjustmentKind
from hub_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.adjustment")


@dataclass(frozen=True)
class FeeAdjustmentSet:
    """The adjustments one enterprise fee produced on one order."""

    enterprise_fee_id: UUID
    adjustment_ids: tuple[UUID, ...]


class AdjustmentSelector(BaseSelector[Adjustment]):
    """
    Selector for the adjustment ledger.

    Contract:
        ``amount_sum`` is the single ledger read used for report totals.
        Callers pass the distinct order ids of a group and optional
        originator / adjustable / included filters.

    Guarantees:
        - All amounts are Decimal (never float).
        - Empty id collections short-circuit to zero / empty results without
          querying.

    Non-goals:
        - No currency conversion; a report covers a single currency.
    """

    def __init__(self, session: Session):
        super().__init__(session)

    # =========================================================================
    # Extraction (per order)
    # =========================================================================

    def enterprise_fee_adjustments(self, order_id: UUID) -> list[FeeAdjustmentSet]:
        """
        Enterprise-fee adjustments of an order grouped by fee.

        Covers fees charged on the order itself and on its line items.

        Returns:
            One FeeAdjustmentSet per distinct originating fee, ordered by
            fee id.
        """
        rows = self.session.execute(
            select(Adjustment.originator_id, Adjustment.id)
            .where(Adjustment.order_id == order_id)
            .where(Adjustment.kind == AdjustmentKind.ENTERPRISE_FEE.value)
            .where(Adjustment.originator_id.is_not(None))
            .order_by(Adjustment.originator_id, Adjustment.id)
        ).all()

        grouped: dict[UUID, list[UUID]] = defaultdict(list)
        for originator_id, adjustment_id in rows:
            grouped[originator_id].append(adjustment_id)

        return [
            FeeAdjustmentSet(enterprise_fee_id=fee_id, adjustment_ids=tuple(ids))
            for fee_id, ids in grouped.items()
        ]

    def tax_rate_ids_for(
        self,
        order_id: UUID,
        adjustment_ids: Collection[UUID],
    ) -> list[UUID]:
        """
        Distinct tax rates charged on the given fee adjustments of an order.

        Returns:
            Tax rate ids ordered by id; empty when the fee carries no tax.
        """
        if not adjustment_ids:
            return []

        rows = self.session.execute(
            select(Adjustment.originator_id)
            .where(Adjustment.order_id == order_id)
            .where(Adjustment.kind == AdjustmentKind.TAX.value)
            .where(Adjustment.adjustable_type == AdjustableType.ADJUSTMENT.value)
            .where(Adjustment.adjustable_id.in_(list(adjustment_ids)))
            .where(Adjustment.originator_id.is_not(None))
            .distinct()
            .order_by(Adjustment.originator_id)
        ).scalars()
        return list(rows)

    # =========================================================================
    # Ledger reads (per order set)
    # =========================================================================

    def enterprise_fee_adjustment_ids(
        self,
        order_ids: Collection[UUID],
        enterprise_fee_id: UUID | None = None,
    ) -> list[UUID]:
        """
        Ids of enterprise-fee adjustments on the given orders.

        Adjustments without an originator are skipped.

        Args:
            order_ids: Orders to look in.
            enterprise_fee_id: Restrict to one fee; None means every fee.
        """
        if not order_ids:
            return []

        query = (
            select(Adjustment.id)
            .where(Adjustment.kind == AdjustmentKind.ENTERPRISE_FEE.value)
            .where(Adjustment.order_id.in_(list(order_ids)))
            .where(Adjustment.originator_id.is_not(None))
        )
        if enterprise_fee_id is not None:
            query = query.where(Adjustment.originator_id == enterprise_fee_id)

        return list(self.session.execute(query.order_by(Adjustment.id)).scalars())

    def amount_sum(
        self,
        kind: AdjustmentKind,
        order_ids: Collection[UUID],
        originator_id: UUID | None = None,
        adjustable_ids: Collection[UUID] | None = None,
        included: bool | None = None,
    ) -> Decimal:
        """
        Exact sum of adjustment amounts that have an originator.

        Args:
            kind: Adjustment kind to sum.
            order_ids: Orders whose adjustments are summed.
            originator_id: Restrict to one fee / tax rate; None means any.
            adjustable_ids: Restrict to adjustments charged against these
                adjustments; None means no restriction, an empty collection
                matches nothing.
            included: Restrict by the included flag; None means either.

        Returns:
            The sum as Decimal, Decimal("0") when nothing matches.
        """
        if not order_ids:
            return ZERO
        if adjustable_ids is not None and not adjustable_ids:
            return ZERO

        query = (
            select(func.sum(Adjustment.amount))
            .where(Adjustment.kind == AdjustmentKind(kind).value)
            .where(Adjustment.order_id.in_(list(order_ids)))
            .where(Adjustment.originator_id.is_not(None))
        )
        if originator_id is not None:
            query = query.where(Adjustment.originator_id == originator_id)
        if adjustable_ids is not None:
            query = query.where(
                Adjustment.adjustable_type == AdjustableType.ADJUSTMENT.value
            ).where(Adjustment.adjustable_id.in_(list(adjustable_ids)))
        if included is not None:
            query = query.where(Adjustment.included.is_(included))

        total = coalesce_amount(self.session.execute(query).scalar())

        logger.debug(
            "adjustment_amount_summed",
            extra={
                "kind": AdjustmentKind(kind).value,
                "order_count": len(order_ids),
                "originator_id": originator_id,
                "included": included,
                "total": total,
            },
        )
        return total
