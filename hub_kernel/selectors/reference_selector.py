"""
Module: hub_kernel.selectors.reference_selector
Responsibility: Point reads of reference data (enterprises, order cycles,
    enterprise fees, tax rates) by id, returned as frozen snapshots.
Architecture position: Kernel > Selectors.  May import from models/ and
    selectors/base.py.  MUST NOT import from domain/ or outer layers.

Invariants enforced:
    - A None id or a missing row yields None, never an exception.  Adjustments
      can outlive the fee or tax rate that produced them.
    - Each selector instance caches its reads; instances are scoped to one
      report invocation.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from hub_kernel.models.enterprise import Enterprise
from hub_kernel.models.enterprise_fee import EnterpriseFee
from hub_kernel.models.order_cycle import OrderCycle
from hub_kernel.models.tax import TaxRate
from hub_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class EnterpriseInfo:
    enterprise_id: UUID
    name: str
    charges_sales_tax: bool


@dataclass(frozen=True)
class OrderCycleInfo:
    order_cycle_id: UUID
    name: str
    orders_open_at: datetime | None = None


@dataclass(frozen=True)
class EnterpriseFeeInfo:
    enterprise_fee_id: UUID
    name: str
    fee_type: str
    owner_name: str | None


@dataclass(frozen=True)
class TaxRateInfo:
    tax_rate_id: UUID
    name: str
    amount: Decimal
    tax_category_name: str | None


_MISSING = object()


class ReferenceSelector(BaseSelector[Enterprise]):
    """Cached point reads of reference data."""

    def __init__(self, session: Session):
        super().__init__(session)
        self._cache: dict[tuple[str, UUID], Any] = {}

    def _cached(self, kind: str, entity_id: UUID | None, load):
        if entity_id is None:
            return None
        key = (kind, entity_id)
        value = self._cache.get(key, _MISSING)
        if value is _MISSING:
            value = load(entity_id)
            self._cache[key] = value
        return value

    def enterprise(self, enterprise_id: UUID | None) -> EnterpriseInfo | None:
        def load(eid: UUID) -> EnterpriseInfo | None:
            row = self.session.get(Enterprise, eid)
            if row is None:
                return None
            return EnterpriseInfo(
                enterprise_id=row.id,
                name=row.name,
                charges_sales_tax=row.charges_sales_tax,
            )

        return self._cached("enterprise", enterprise_id, load)

    def order_cycle(self, order_cycle_id: UUID | None) -> OrderCycleInfo | None:
        def load(ocid: UUID) -> OrderCycleInfo | None:
            row = self.session.get(OrderCycle, ocid)
            if row is None:
                return None
            return OrderCycleInfo(
                order_cycle_id=row.id,
                name=row.name,
                orders_open_at=row.orders_open_at,
            )

        return self._cached("order_cycle", order_cycle_id, load)

    def enterprise_fee(self, enterprise_fee_id: UUID | None) -> EnterpriseFeeInfo | None:
        def load(fid: UUID) -> EnterpriseFeeInfo | None:
            row = self.session.get(EnterpriseFee, fid)
            if row is None:
                return None
            owner = row.enterprise
            return EnterpriseFeeInfo(
                enterprise_fee_id=row.id,
                name=row.name,
                fee_type=row.fee_type,
                owner_name=owner.name if owner is not None else None,
            )

        return self._cached("enterprise_fee", enterprise_fee_id, load)

    def tax_rate(self, tax_rate_id: UUID | None) -> TaxRateInfo | None:
        def load(tid: UUID) -> TaxRateInfo | None:
            row = self.session.get(TaxRate, tid)
            if row is None:
                return None
            category = row.tax_category
            return TaxRateInfo(
                tax_rate_id=row.id,
                name=row.name,
                amount=row.amount,
                tax_category_name=category.name if category is not None else None,
            )

        return self._cached("tax_rate", tax_rate_id, load)
