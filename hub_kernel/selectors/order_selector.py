"""
Module: hub_kernel.selectors.order_selector
Responsibility: Read-only search over completed orders, returning frozen
    OrderInfo snapshots that report pipelines consume without touching the ORM.
Architecture position: Kernel > Selectors.  May import from models/ and
    selectors/base.py.  MUST NOT import from domain/ or outer layers.

Invariants enforced:
    - Only completed orders (state ``complete`` with a completion time) are
      returned.
    - Results are ordered by completed_at then number, so the same filters
      always yield the same sequence.
    - ``supplier_ids`` on each snapshot are distinct and keep line-item order.
"""

from collections.abc import Callable, Collection
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from hub_kernel.logging_config import get_logger
from hub_kernel.models.order import LineItem, Order, OrderState
from hub_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.order")


@dataclass(frozen=True)
class OrderInfo:
    """
    Snapshot of an order needed by report pipelines.

    This is the bridge between the ORM layer (Order model) and pure report
    stages.
    """

    order_id: UUID
    number: str
    distributor_id: UUID | None
    order_cycle_id: UUID | None
    supplier_ids: tuple[UUID, ...] = ()
    completed_at: datetime | None = None


def order_info_from_model(order: Order) -> OrderInfo:
    """Convert an Order (with loaded line items) to an OrderInfo."""
    supplier_ids = tuple(dict.fromkeys(item.supplier_id for item in order.line_items))
    return OrderInfo(
        order_id=order.id,
        number=order.number,
        distributor_id=order.distributor_id,
        order_cycle_id=order.order_cycle_id,
        supplier_ids=supplier_ids,
        completed_at=order.completed_at,
    )


class OrderSelector(BaseSelector[Order]):
    """
    Selector for completed orders.

    Contract:
        ``search`` applies SQL-level filters, then the optional ``visible``
        predicate in Python.  The predicate is opaque to the selector; it is
        how callers apply their permission rules.
    """

    def __init__(self, session: Session):
        super().__init__(session)

    def search(
        self,
        start_at: datetime | None = None,
        end_at: datetime | None = None,
        distributor_ids: Collection[UUID] | None = None,
        producer_ids: Collection[UUID] | None = None,
        order_cycle_ids: Collection[UUID] | None = None,
        visible: Callable[[OrderInfo], bool] | None = None,
    ) -> list[OrderInfo]:
        """
        Find completed orders matching the filters.

        Args:
            start_at: Inclusive lower bound on completed_at.
            end_at: Exclusive upper bound on completed_at.
            distributor_ids: Restrict to orders placed with these hubs.
            producer_ids: Restrict to orders with a line item from one of
                these suppliers.
            order_cycle_ids: Restrict to these order cycles.
            visible: Permission predicate; orders it rejects are dropped.

        Returns:
            OrderInfo snapshots ordered by completed_at then number.
        """
        query = (
            select(Order)
            .options(selectinload(Order.line_items))
            .where(Order.state == OrderState.COMPLETE.value)
            .where(Order.completed_at.is_not(None))
        )

        if start_at is not None:
            query = query.where(Order.completed_at >= start_at)
        if end_at is not None:
            query = query.where(Order.completed_at < end_at)
        if distributor_ids:
            query = query.where(Order.distributor_id.in_(list(distributor_ids)))
        if order_cycle_ids:
            query = query.where(Order.order_cycle_id.in_(list(order_cycle_ids)))
        if producer_ids:
            query = query.where(
                Order.id.in_(
                    select(LineItem.order_id).where(
                        LineItem.supplier_id.in_(list(producer_ids))
                    )
                )
            )

        query = query.order_by(Order.completed_at, Order.number)
        orders = [
            order_info_from_model(order)
            for order in self.session.execute(query).scalars()
        ]

        candidate_count = len(orders)
        if visible is not None:
            orders = [order for order in orders if visible(order)]

        logger.info(
            "orders_searched",
            extra={
                "candidate_count": candidate_count,
                "visible_count": len(orders),
            },
        )
        return orders
