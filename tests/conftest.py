"""
Pytest fixtures for the hub reporting test suite.

Provides:
- Database sessions with per-test rollback
- Structured logging fixtures
- A data factory for enterprises, order cycles, fees, tax rates, orders
  and adjustments

Environment Variables:
- DATABASE_URL: database to run against.  Defaults to an in-memory SQLite
  database; set a PostgreSQL URL to run the suite against PostgreSQL.
"""

import json
import logging
import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from io import StringIO
from typing import Generator
from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from hub_kernel.db.engine import (
    create_tables,
    drop_tables,
    init_engine_from_url,
    reset_engine,
)
from hub_kernel.domain.clock import DeterministicClock
from hub_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from hub_kernel.models import (
    AdjustableType,
    Adjustment,
    AdjustmentKind,
    Enterprise,
    EnterpriseFee,
    FeeType,
    LineItem,
    Order,
    OrderCycle,
    OrderState,
    TaxCategory,
    TaxRate,
)

DEFAULT_DATABASE_URL = "sqlite://"

REPORT_EPOCH = datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture hub_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            ...
            logs = captured_logs()
            assert any(r["message"] == "fee_report_generated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("hub_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


def get_database_url() -> str:
    """Get database URL from environment, or use in-memory SQLite."""
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


@pytest.fixture(scope="session")
def db_engine():
    """Single engine for the entire test session."""
    eng = init_engine_from_url(get_database_url(), echo=False)
    yield eng
    reset_engine()


@pytest.fixture(scope="session")
def db_tables(db_engine):
    """Create all tables once per session, drop once at end."""
    drop_tables()
    create_tables()
    yield
    drop_tables()


@pytest.fixture(scope="function")
def session(db_tables, db_engine) -> Generator[Session, None, None]:
    """Provide a database session for testing.

    The session is bound to a connection with an outer transaction that is
    rolled back at teardown, undoing ALL data written during the test.
    Tests flush but never commit.
    """
    conn = db_engine.connect()
    trans = conn.begin()
    sess = Session(bind=conn, expire_on_commit=False)
    yield sess
    try:
        sess.close()
    finally:
        try:
            trans.rollback()
        finally:
            conn.close()


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock(REPORT_EPOCH)


# =============================================================================
# Data factory
# =============================================================================


class HubData:
    """
    Creates marketplace records in the test session.

    Every helper flushes so ids are usable immediately.
    """

    def __init__(self, session: Session):
        self.session = session
        self._order_seq = 0

    def _add(self, obj):
        self.session.add(obj)
        self.session.flush()
        return obj

    def enterprise(self, name: str, charges_sales_tax: bool = False) -> Enterprise:
        return self._add(Enterprise(name=name, charges_sales_tax=charges_sales_tax))

    def order_cycle(
        self,
        name: str,
        opens_at: datetime | None = REPORT_EPOCH - timedelta(days=7),
    ) -> OrderCycle:
        closes_at = opens_at + timedelta(days=7) if opens_at else None
        return self._add(
            OrderCycle(name=name, orders_open_at=opens_at, orders_close_at=closes_at)
        )

    def tax_rate(
        self,
        name: str,
        amount: str,
        category: str | None = "Fees",
        included_in_price: bool = False,
    ) -> TaxRate:
        tax_category = self._add(TaxCategory(name=category)) if category else None
        return self._add(
            TaxRate(
                name=name,
                amount=Decimal(amount),
                included_in_price=included_in_price,
                tax_category_id=tax_category.id if tax_category else None,
            )
        )

    def fee(
        self,
        name: str,
        owner: Enterprise,
        fee_type: FeeType = FeeType.ADMIN,
    ) -> EnterpriseFee:
        return self._add(
            EnterpriseFee(name=name, fee_type=fee_type.value, enterprise_id=owner.id)
        )

    def order(
        self,
        distributor: Enterprise | None,
        order_cycle: OrderCycle | None,
        suppliers: list[Enterprise] = (),
        completed_at: datetime | None = REPORT_EPOCH,
        state: OrderState = OrderState.COMPLETE,
    ) -> Order:
        self._order_seq += 1
        order = Order(
            number=f"R{self._order_seq:06d}",
            state=state.value,
            completed_at=completed_at,
            distributor_id=distributor.id if distributor else None,
            order_cycle_id=order_cycle.id if order_cycle else None,
        )
        for position, supplier in enumerate(suppliers):
            order.line_items.append(
                LineItem(
                    supplier_id=supplier.id,
                    position=position,
                    quantity=1,
                    price=Decimal("5.00"),
                )
            )
        return self._add(order)

    def fee_adjustment(
        self,
        order: Order,
        fee: EnterpriseFee,
        amount: str,
        on_line_item: LineItem | None = None,
    ) -> Adjustment:
        adjustable_type = AdjustableType.LINE_ITEM if on_line_item else AdjustableType.ORDER
        return self._add(
            Adjustment(
                order_id=order.id,
                amount=Decimal(amount),
                kind=AdjustmentKind.ENTERPRISE_FEE.value,
                originator_id=fee.id,
                adjustable_type=adjustable_type.value,
                adjustable_id=on_line_item.id if on_line_item else order.id,
                label=fee.name,
            )
        )

    def tax_adjustment(
        self,
        order: Order,
        rate: TaxRate,
        fee_adjustment: Adjustment,
        amount: str,
        included: bool = False,
    ) -> Adjustment:
        return self._add(
            Adjustment(
                order_id=order.id,
                amount=Decimal(amount),
                kind=AdjustmentKind.TAX.value,
                originator_id=rate.id,
                adjustable_type=AdjustableType.ADJUSTMENT.value,
                adjustable_id=fee_adjustment.id,
                included=included,
                label=rate.name,
            )
        )


@pytest.fixture
def hub_data(session) -> HubData:
    return HubData(session)


@pytest.fixture
def missing_id():
    """An id that matches no row."""
    return uuid4()
