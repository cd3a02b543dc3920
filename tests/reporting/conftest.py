"""
Fixtures for the pure enterprise fee summary stages.

``InMemoryLedger`` satisfies both the fee adjustment extractor and the
adjustment ledger protocols, so fan-out, grouping and aggregation can be
exercised without a database.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from hub_kernel.models.adjustment import AdjustableType, AdjustmentKind
from hub_kernel.selectors.adjustment_selector import FeeAdjustmentSet
from hub_kernel.selectors.order_selector import OrderInfo


@dataclass(frozen=True)
class LedgerEntry:
    adjustment_id: UUID
    order_id: UUID
    kind: AdjustmentKind
    originator_id: UUID | None
    adjustable_type: AdjustableType
    adjustable_id: UUID
    amount: Decimal
    included: bool = False


@dataclass
class InMemoryLedger:
    entries: list[LedgerEntry] = field(default_factory=list)

    # -- writers used by tests ------------------------------------------------

    def fee(self, order: OrderInfo, fee_id: UUID | None, amount: str) -> UUID:
        entry = LedgerEntry(
            adjustment_id=uuid4(),
            order_id=order.order_id,
            kind=AdjustmentKind.ENTERPRISE_FEE,
            originator_id=fee_id,
            adjustable_type=AdjustableType.ORDER,
            adjustable_id=order.order_id,
            amount=Decimal(amount),
        )
        self.entries.append(entry)
        return entry.adjustment_id

    def tax(
        self,
        order: OrderInfo,
        tax_rate_id: UUID,
        fee_adjustment_id: UUID,
        amount: str,
        included: bool = False,
    ) -> UUID:
        entry = LedgerEntry(
            adjustment_id=uuid4(),
            order_id=order.order_id,
            kind=AdjustmentKind.TAX,
            originator_id=tax_rate_id,
            adjustable_type=AdjustableType.ADJUSTMENT,
            adjustable_id=fee_adjustment_id,
            amount=Decimal(amount),
            included=included,
        )
        self.entries.append(entry)
        return entry.adjustment_id

    # -- extractor protocol ---------------------------------------------------

    def enterprise_fee_adjustments(self, order_id: UUID) -> list[FeeAdjustmentSet]:
        grouped: dict[UUID, list[UUID]] = {}
        for e in self.entries:
            if (
                e.order_id == order_id
                and e.kind == AdjustmentKind.ENTERPRISE_FEE
                and e.originator_id is not None
            ):
                grouped.setdefault(e.originator_id, []).append(e.adjustment_id)
        return [
            FeeAdjustmentSet(enterprise_fee_id=fee_id, adjustment_ids=tuple(ids))
            for fee_id, ids in grouped.items()
        ]

    def tax_rate_ids_for(self, order_id, adjustment_ids) -> list[UUID]:
        ids = set(adjustment_ids)
        return list(dict.fromkeys(
            e.originator_id
            for e in self.entries
            if e.order_id == order_id
            and e.kind == AdjustmentKind.TAX
            and e.adjustable_type == AdjustableType.ADJUSTMENT
            and e.adjustable_id in ids
        ))

    # -- ledger protocol ------------------------------------------------------

    def enterprise_fee_adjustment_ids(self, order_ids, enterprise_fee_id=None) -> list[UUID]:
        order_ids = set(order_ids)
        return [
            e.adjustment_id
            for e in self.entries
            if e.kind == AdjustmentKind.ENTERPRISE_FEE
            and e.originator_id is not None
            and e.order_id in order_ids
            and (enterprise_fee_id is None or e.originator_id == enterprise_fee_id)
        ]

    def amount_sum(
        self,
        kind,
        order_ids,
        originator_id=None,
        adjustable_ids=None,
        included=None,
    ) -> Decimal:
        order_ids = set(order_ids)
        total = Decimal("0")
        for e in self.entries:
            if e.kind != kind or e.order_id not in order_ids:
                continue
            if e.originator_id is None:
                continue
            if originator_id is not None and e.originator_id != originator_id:
                continue
            if adjustable_ids is not None and (
                e.adjustable_type != AdjustableType.ADJUSTMENT
                or e.adjustable_id not in set(adjustable_ids)
            ):
                continue
            if included is not None and e.included != included:
                continue
            total += e.amount
        return total


def _make_order(
    distributor_id: UUID | None = None,
    order_cycle_id: UUID | None = None,
    supplier_ids: tuple[UUID, ...] = (),
    number: str = "R1",
) -> OrderInfo:
    return OrderInfo(
        order_id=uuid4(),
        number=number,
        distributor_id=distributor_id,
        order_cycle_id=order_cycle_id,
        supplier_ids=supplier_ids,
    )


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def make_order():
    """Build an OrderInfo snapshot with a fresh order id."""
    return _make_order


@pytest.fixture
def new_ledger():
    """Ledger constructor, for tests that need a fresh ledger per example."""
    return InMemoryLedger
