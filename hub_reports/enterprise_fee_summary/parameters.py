"""
Report parameters and permissions for the enterprise fee summary.

Parameters are validated and authorized before any order is queried; after
that the pipeline trusts its input set completely.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol
from uuid import UUID

from hub_kernel.exceptions import InvalidReportParametersError, ReportAuthorizationError
from hub_kernel.selectors.order_selector import OrderInfo


class ReportPermissions(Protocol):
    """What the caller may see.  Opaque to the pipeline."""

    def can_view(self, order: OrderInfo) -> bool: ...

    def manages(self, enterprise_id: UUID) -> bool: ...


@dataclass(frozen=True)
class EnterprisePermissions:
    """
    Permissions derived from the enterprises a user manages.

    ``managed_enterprise_ids=None`` means unrestricted (super admin).  A
    restricted user sees an order when they manage its distributor or any
    supplier of its line items.
    """

    managed_enterprise_ids: frozenset[UUID] | None = None

    @property
    def is_unrestricted(self) -> bool:
        return self.managed_enterprise_ids is None

    def manages(self, enterprise_id: UUID) -> bool:
        if self.is_unrestricted:
            return True
        return enterprise_id in self.managed_enterprise_ids

    def can_view(self, order: OrderInfo) -> bool:
        if self.is_unrestricted:
            return True
        if order.distributor_id is not None and self.manages(order.distributor_id):
            return True
        return any(self.manages(supplier_id) for supplier_id in order.supplier_ids)


def _parse_datetime(name: str, value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError as exc:
            raise InvalidReportParametersError(name, f"not an ISO date: {value!r}") from exc
    return _as_utc(parsed)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_ids(name: str, values: Any) -> frozenset[UUID]:
    if values is None or values == "":
        return frozenset()
    if isinstance(values, (str, UUID)):
        values = [values]
    ids: set[UUID] = set()
    for value in values:
        if isinstance(value, UUID):
            ids.add(value)
            continue
        try:
            ids.add(UUID(str(value)))
        except ValueError as exc:
            raise InvalidReportParametersError(name, f"not an id: {value!r}") from exc
    return frozenset(ids)


@dataclass(frozen=True)
class ReportParameters:
    """
    Filter set of one report invocation.

    ``start_at`` is inclusive and ``end_at`` exclusive, both on the order's
    completion time.  Empty id sets mean "no restriction".
    Naive datetimes are read as UTC.
    """

    start_at: datetime | None = None
    end_at: datetime | None = None
    distributor_ids: frozenset[UUID] = field(default_factory=frozenset)
    producer_ids: frozenset[UUID] = field(default_factory=frozenset)
    order_cycle_ids: frozenset[UUID] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_at", _as_utc(self.start_at))
        object.__setattr__(self, "end_at", _as_utc(self.end_at))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReportParameters:
        """
        Parse parameters from request-style data (ISO strings, id lists).

        Raises:
            InvalidReportParametersError: On malformed dates or ids.
        """
        return cls(
            start_at=_parse_datetime("start_at", data.get("start_at")),
            end_at=_parse_datetime("end_at", data.get("end_at")),
            distributor_ids=_parse_ids("distributor_ids", data.get("distributor_ids")),
            producer_ids=_parse_ids("producer_ids", data.get("producer_ids")),
            order_cycle_ids=_parse_ids("order_cycle_ids", data.get("order_cycle_ids")),
        )

    def validate(self) -> None:
        """
        Raises:
            InvalidReportParametersError: If the date range is inverted.
        """
        if (
            self.start_at is not None
            and self.end_at is not None
            and self.start_at > self.end_at
        ):
            raise InvalidReportParametersError(
                "start_at", "must not be after end_at",
            )

    def authorize(self, permissions: ReportPermissions) -> None:
        """
        Check every requested distributor and producer against permissions.

        Raises:
            ReportAuthorizationError: Naming the first offending filter.
        """
        for name, ids in (
            ("distributor_ids", self.distributor_ids),
            ("producer_ids", self.producer_ids),
        ):
            denied = sorted(str(i) for i in ids if not permissions.manages(i))
            if denied:
                raise ReportAuthorizationError(name, denied)

    def as_metadata(self) -> tuple[tuple[str, str], ...]:
        """Stable, string-only rendering for report metadata and logs."""
        pairs: list[tuple[str, str]] = []
        if self.start_at is not None:
            pairs.append(("start_at", self.start_at.isoformat()))
        if self.end_at is not None:
            pairs.append(("end_at", self.end_at.isoformat()))
        for name, ids in (
            ("distributor_ids", self.distributor_ids),
            ("producer_ids", self.producer_ids),
            ("order_cycle_ids", self.order_cycle_ids),
        ):
            if ids:
                pairs.append((name, ",".join(sorted(str(i) for i in ids))))
        return tuple(pairs)


def managed_by(enterprise_ids: Iterable[UUID]) -> EnterprisePermissions:
    """Permissions for a user managing the given enterprises."""
    return EnterprisePermissions(managed_enterprise_ids=frozenset(enterprise_ids))
