"""
Tests for report ordering and summary-row insertion.

Summary totals are supplied by a fake that records the order-id unions it
was asked for, so the tests can check both placement and provenance.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from hub_reports.enterprise_fee_summary.hierarchy import build_report_rows
from hub_reports.enterprise_fee_summary.models import (
    FeeTotals,
    GroupKey,
    ReportRow,
    SummaryLevel,
)


class RecordingTotals:
    """Summary totals of 1.00 fee per distinct order; records every call."""

    def __init__(self):
        self.calls: list[tuple[UUID, ...]] = []

    def __call__(self, order_ids):
        self.calls.append(order_ids)
        return FeeTotals.of(Decimal(len(order_ids)), Decimal("0"))


class Ids:
    def __init__(self):
        self._ids: dict[str, UUID] = {}

    def __getitem__(self, name: str) -> UUID:
        return self._ids.setdefault(name, uuid4())


@pytest.fixture
def ids():
    return Ids()


def detail(
    ids,
    distributor="Hub A",
    producer="Farm A",
    order_cycle="Cycle 1",
    opens_at=datetime(2024, 3, 1, tzinfo=timezone.utc),
    fee="Packing",
    tax_rate=None,
    order_ids=(),
):
    key = GroupKey(
        tax_rate_id=ids[f"rate:{tax_rate}"] if tax_rate else None,
        enterprise_fee_id=ids[f"fee:{fee}"],
        supplier_id=ids[f"producer:{producer}"],
        distributor_id=ids[f"distributor:{distributor}"],
        order_cycle_id=ids[f"cycle:{order_cycle}"],
    )
    return ReportRow(
        distributor=distributor,
        producer=producer,
        order_cycle=order_cycle,
        enterprise_fee_name=fee,
        tax_rate_name=tax_rate,
        total_excl_tax=Decimal("1"),
        total_incl_tax=Decimal("1"),
        group_key=key,
        order_ids=tuple(ids[f"order:{o}"] for o in order_ids),
        order_cycle_opens_at=opens_at,
    )


def _labels(rows):
    return [
        (r.summary_level.value if r.summary_level else "detail", r.distributor, r.producer)
        for r in rows
    ]


class TestOrdering:

    def test_detail_rows_sorted_by_distributor_then_producer(self, ids):
        rows = [
            detail(ids, distributor="Hub B", producer="Farm A", order_ids=["1"]),
            detail(ids, distributor="Hub A", producer="Farm B", order_ids=["2"]),
            detail(ids, distributor="Hub A", producer="Farm A", order_ids=["3"]),
        ]

        out = build_report_rows(rows, RecordingTotals(), levels=())

        assert [(r.distributor, r.producer) for r in out] == [
            ("Hub A", "Farm A"),
            ("Hub A", "Farm B"),
            ("Hub B", "Farm A"),
        ]

    def test_order_cycles_sorted_by_start_date(self, ids):
        rows = [
            detail(ids, order_cycle="Later", opens_at=datetime(2024, 4, 1, tzinfo=timezone.utc)),
            detail(ids, order_cycle="Earlier", opens_at=datetime(2024, 2, 1, tzinfo=timezone.utc)),
        ]

        out = build_report_rows(rows, RecordingTotals(), levels=())

        assert [r.order_cycle for r in out] == ["Earlier", "Later"]

    def test_missing_names_sort_last(self, ids):
        rows = [
            detail(ids, distributor=None, order_ids=["1"]),
            detail(ids, distributor="Hub Z", order_ids=["2"]),
        ]

        out = build_report_rows(rows, RecordingTotals(), levels=())

        assert [r.distributor for r in out] == ["Hub Z", None]

    def test_empty_input(self):
        assert build_report_rows([], RecordingTotals()) == ()


class TestSummaryRows:

    def test_summary_after_each_group_at_every_level(self, ids):
        rows = [
            detail(ids, distributor="Hub A", producer="Farm A", order_ids=["1"]),
            detail(ids, distributor="Hub A", producer="Farm B", order_ids=["2"]),
        ]

        out = build_report_rows(rows, RecordingTotals())

        assert _labels(out) == [
            ("detail", "Hub A", "Farm A"),
            ("order_cycle", "Hub A", "Farm A"),
            ("producer", "Hub A", "Farm A"),
            ("detail", "Hub A", "Farm B"),
            ("order_cycle", "Hub A", "Farm B"),
            ("producer", "Hub A", "Farm B"),
            ("distributor", "Hub A", None),
        ]

    def test_only_requested_levels(self, ids):
        rows = [
            detail(ids, order_cycle="Cycle 1", order_ids=["1"]),
            detail(ids, order_cycle="Cycle 2", order_ids=["2"]),
        ]

        out = build_report_rows(rows, RecordingTotals(), levels=(SummaryLevel.ORDER_CYCLE,))

        assert [r.summary_level for r in out if r.is_summary] == [
            SummaryLevel.ORDER_CYCLE,
            SummaryLevel.ORDER_CYCLE,
        ]
        assert [r.order_cycle for r in out if r.is_summary] == ["Cycle 1", "Cycle 2"]

    def test_summary_totals_use_union_of_order_ids(self, ids):
        """Two rows sharing order 1 are summarised over {1, 2}, not 1 + 1 + 2."""
        rows = [
            detail(ids, fee="Admin", order_ids=["1"]),
            detail(ids, fee="Packing", tax_rate="State", order_ids=["1", "2"]),
        ]
        totals = RecordingTotals()

        out = build_report_rows(rows, totals, levels=(SummaryLevel.ORDER_CYCLE,))

        (summary,) = [r for r in out if r.is_summary]
        assert set(summary.order_ids) == {ids["order:1"], ids["order:2"]}
        assert len(summary.order_ids) == 2
        assert summary.total_excl_tax == Decimal("2")
        assert totals.calls == [summary.order_ids]

    def test_summary_rows_carry_only_grouping_columns(self, ids):
        rows = [detail(ids, fee="Packing", tax_rate="State", order_ids=["1"])]

        out = build_report_rows(rows, RecordingTotals())
        by_level = {r.summary_level: r for r in out if r.is_summary}

        distributor_row = by_level[SummaryLevel.DISTRIBUTOR]
        assert distributor_row.distributor == "Hub A"
        assert distributor_row.producer is None
        assert distributor_row.order_cycle is None

        producer_row = by_level[SummaryLevel.PRODUCER]
        assert producer_row.producer == "Farm A"
        assert producer_row.order_cycle is None

        cycle_row = by_level[SummaryLevel.ORDER_CYCLE]
        assert cycle_row.order_cycle == "Cycle 1"
        assert cycle_row.enterprise_fee_name is None
        assert cycle_row.tax_rate_name is None
        assert cycle_row.group_key is None

    def test_identity_holds_on_summary_rows(self, ids):
        rows = [detail(ids, order_ids=["1", "2", "3"])]

        out = build_report_rows(rows, RecordingTotals())

        for row in out:
            assert row.total_excl_tax + row.tax == row.total_incl_tax
