"""
Enterprise Fee Summary Service (``hub_reports.enterprise_fee_summary.service``).

Responsibility
--------------
Orchestrates the "enterprise fees with tax, by producer" report:

    search (order fact source) -> fan_out -> group_tuples
        -> FeeAggregator -> project_row -> build_report_rows

by bridging kernel selectors (``OrderSelector``, ``AdjustmentSelector``,
``ReferenceSelector``) to the stage functions of this package.  This is a
**read-only** service.

Invariants enforced
-------------------
* Read-only -- no session writes.
* All monetary amounts use ``Decimal`` -- NEVER ``float``.
* Parameters are validated and authorized before any query runs.

Failure modes
-------------
* Invalid parameters -> ``InvalidReportParametersError`` before querying.
* Unauthorized enterprise filter -> ``ReportAuthorizationError`` before
  querying.
* Missing reference data -> ``None`` columns, never an exception.
* Selector/database failure -> exception propagates unmodified (no retry).
"""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy.orm import Session

from hub_kernel.domain.clock import Clock, SystemClock
from hub_kernel.logging_config import LogContext, get_logger
from hub_kernel.selectors.adjustment_selector import AdjustmentSelector
from hub_kernel.selectors.order_selector import OrderInfo, OrderSelector
from hub_kernel.selectors.reference_selector import ReferenceSelector
from hub_reports.enterprise_fee_summary.aggregation import FeeAggregator, group_tuples
from hub_reports.enterprise_fee_summary.columns import project_row, render_to_dict
from hub_reports.enterprise_fee_summary.config import EnterpriseFeeReportConfig
from hub_reports.enterprise_fee_summary.fanout import fan_out
from hub_reports.enterprise_fee_summary.hierarchy import build_report_rows
from hub_reports.enterprise_fee_summary.models import (
    REPORT_TYPE,
    EnterpriseFeeReport,
    FeeGroup,
    GroupKey,
    ReportMetadata,
)
from hub_reports.enterprise_fee_summary.parameters import (
    EnterprisePermissions,
    ReportParameters,
    ReportPermissions,
)

logger = get_logger("reports.enterprise_fee_summary.service")


class EnterpriseFeeReportService:
    """
    Enterprise fee summary generation service.

    Contract
    --------
    * ``generate`` returns an ``EnterpriseFeeReport`` whose rows are ordered
      by distributor, producer and order cycle with summary rows inline.
    * ``query_result`` exposes the grouped fan-out before projection.
    * All methods are **read-only**.

    Non-goals
    ---------
    * Rendering to CSV/HTML; ``render`` only produces plain dicts.
    * Authorization beyond the injected permissions object.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: EnterpriseFeeReportConfig | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or EnterpriseFeeReportConfig.with_defaults()
        self._orders = OrderSelector(session)
        self._adjustments = AdjustmentSelector(session)

        logger.info(
            "fee_report_service_initialized",
            extra={
                "entity_name": self._config.entity_name,
                "currency": self._config.currency,
            },
        )

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _prepare(
        self,
        parameters: ReportParameters,
        permissions: ReportPermissions | None,
    ) -> ReportPermissions:
        permissions = permissions or EnterprisePermissions()
        parameters.validate()
        parameters.authorize(permissions)
        return permissions

    def _build_metadata(self, parameters: ReportParameters) -> ReportMetadata:
        return ReportMetadata(
            report_type=REPORT_TYPE,
            entity_name=self._config.entity_name,
            currency=self._config.currency,
            generated_at=self._clock.now().isoformat(),
            parameters=parameters.as_metadata(),
        )

    # =========================================================================
    # Public API
    # =========================================================================

    def search(
        self,
        parameters: ReportParameters,
        permissions: ReportPermissions | None = None,
    ) -> list[OrderInfo]:
        """Completed orders the caller may see that match the filters."""
        permissions = self._prepare(parameters, permissions)
        return self._orders.search(
            start_at=parameters.start_at,
            end_at=parameters.end_at,
            distributor_ids=parameters.distributor_ids,
            producer_ids=parameters.producer_ids,
            order_cycle_ids=parameters.order_cycle_ids,
            visible=permissions.can_view,
        )

    def query_result(
        self,
        parameters: ReportParameters,
        permissions: ReportPermissions | None = None,
    ) -> dict[GroupKey, FeeGroup]:
        """
        Group the orders by (tax rate, enterprise fee, supplier, distributor,
        order cycle).
        """
        orders = self.search(parameters, permissions)
        tuples = fan_out(orders, self._adjustments, parameters.producer_ids)
        return group_tuples(tuples)

    def generate(
        self,
        parameters: ReportParameters,
        permissions: ReportPermissions | None = None,
    ) -> EnterpriseFeeReport:
        """
        Generate the report.

        Args:
            parameters: Filter set of this invocation.
            permissions: Caller permissions; None means unrestricted.

        Returns:
            EnterpriseFeeReport with detail and summary rows.
        """
        with LogContext.bind(report_id=str(uuid4())):
            groups = self.query_result(parameters, permissions)

            aggregator = FeeAggregator(self._adjustments)
            lookup = ReferenceSelector(self._session)
            detail_rows = [
                project_row(group, aggregator.totals_for_group(group), lookup)
                for group in groups.values()
            ]
            rows = build_report_rows(
                detail_rows,
                aggregator.totals_for_orders,
                self._config.active_summary_levels,
            )

            report = EnterpriseFeeReport(
                metadata=self._build_metadata(parameters),
                rows=rows,
            )

            logger.info(
                "fee_report_generated",
                extra={
                    "report_type": REPORT_TYPE,
                    "group_count": len(groups),
                    "row_count": len(rows),
                    "summary_row_count": len(report.summary_rows()),
                },
            )
            return report

    def render(self, report: EnterpriseFeeReport) -> dict:
        """Plain-dict rendering at the configured display precision."""
        return render_to_dict(report, self._config.display_precision)
