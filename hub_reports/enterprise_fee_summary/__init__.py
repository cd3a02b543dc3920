"""
Enterprise Fee Summary Report (``hub_reports.enterprise_fee_summary``).

Responsibility
--------------
Read-only report of enterprise fees and the taxes charged on them, broken
down by tax rate, enterprise fee, producer, distributor and order cycle, with
summary rows per distributor, producer and order cycle.

Architecture position
---------------------
**Reports layer** -- pure stage functions (fan-out, grouping, projection,
hierarchy) wired to kernel selectors by ``EnterpriseFeeReportService``.

Invariants enforced
-------------------
* No data is written.
* Every row satisfies total_excl_tax + tax == total_incl_tax exactly.
* Summary totals are recomputed from order ids, never summed from rows.
"""

from hub_reports.enterprise_fee_summary.config import EnterpriseFeeReportConfig
from hub_reports.enterprise_fee_summary.models import (
    EnterpriseFeeReport,
    FanoutTuple,
    FeeGroup,
    FeeJoin,
    FeeTotals,
    GroupKey,
    ReportMetadata,
    ReportRow,
    SummaryLevel,
    TaxJoin,
)
from hub_reports.enterprise_fee_summary.parameters import (
    EnterprisePermissions,
    ReportParameters,
    managed_by,
)
from hub_reports.enterprise_fee_summary.service import EnterpriseFeeReportService

__all__ = [
    # Service
    "EnterpriseFeeReportService",
    # Config
    "EnterpriseFeeReportConfig",
    # Parameters
    "ReportParameters",
    "EnterprisePermissions",
    "managed_by",
    # Models
    "SummaryLevel",
    "FeeJoin",
    "TaxJoin",
    "FanoutTuple",
    "GroupKey",
    "FeeGroup",
    "FeeTotals",
    "ReportRow",
    "ReportMetadata",
    "EnterpriseFeeReport",
]
