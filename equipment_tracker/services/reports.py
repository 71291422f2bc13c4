"""Report builders for the inventory: status, maintenance, grouping and readiness."""

from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, Sequence

from pydantic import BaseModel, Field

from equipment_tracker.models import EquipmentRead, EquipmentStatus, utcnow
from equipment_tracker.services import query


class ReportKind(str, Enum):
    STATUS = "status"
    MAINTENANCE = "maintenance"
    LOCATION = "location"
    TYPE = "type"
    OUT_OF_SERVICE = "out-of-service"
    COMPLIANCE = "compliance"


def _pct(count: int, total: int) -> Optional[float]:
    """Percentage rounded to one decimal, None for an empty fleet."""
    value = query.percentage(count, total)
    return None if math.isnan(value) else round(value, 1)


class ReportBase(BaseModel):
    kind: ReportKind
    generated_at: datetime = Field(default_factory=utcnow)
    total: int


class StatusReport(ReportBase):
    kind: ReportKind = ReportKind.STATUS
    counts: dict[EquipmentStatus, int]
    items: list[EquipmentRead]


class MaintenanceReport(ReportBase):
    kind: ReportKind = ReportKind.MAINTENANCE
    maintenance_count: int
    out_of_service_count: int
    requiring_attention: int
    maintenance_items: list[EquipmentRead]
    out_of_service_items: list[EquipmentRead]


class GroupSection(BaseModel):
    name: str
    total: int
    available: int
    items: list[EquipmentRead]


class GroupReport(ReportBase):
    group_count: int
    average_per_group: Optional[float] = Field(
        default=None, description="Items per group; None when nothing is tracked."
    )
    sections: list[GroupSection]


class OutOfServiceReport(ReportBase):
    kind: ReportKind = ReportKind.OUT_OF_SERVICE
    out_of_service_count: int
    maintenance_count: int
    total_unavailable: int
    unavailable_percent: Optional[float] = None
    out_of_service_items: list[EquipmentRead]
    maintenance_items: list[EquipmentRead]


class ReadinessRow(BaseModel):
    category: str
    status: EquipmentStatus
    count: int
    percent: Optional[float] = None


class ComplianceReport(ReportBase):
    kind: ReportKind = ReportKind.COMPLIANCE
    compliance_score: Optional[float] = Field(
        default=None, description="Readiness percentage; None for an empty fleet."
    )
    operational_ready: int
    missing_serial_count: int
    needs_attention: int
    missing_serial_items: list[EquipmentRead]
    readiness: list[ReadinessRow]


def _now(generated_at: Optional[datetime]) -> datetime:
    return generated_at or utcnow()


def status_report(
    records: Sequence[EquipmentRead], generated_at: Optional[datetime] = None
) -> StatusReport:
    return StatusReport(
        generated_at=_now(generated_at),
        total=len(records),
        counts=query.count_by_status(records),
        items=list(records),
    )


def maintenance_report(
    records: Sequence[EquipmentRead], generated_at: Optional[datetime] = None
) -> MaintenanceReport:
    in_maintenance = query.filter_by(records, status=EquipmentStatus.MAINTENANCE)
    out_of_service = query.filter_by(records, status=EquipmentStatus.OUT_OF_SERVICE)
    return MaintenanceReport(
        generated_at=_now(generated_at),
        total=len(records),
        maintenance_count=len(in_maintenance),
        out_of_service_count=len(out_of_service),
        requiring_attention=len(in_maintenance) + len(out_of_service),
        maintenance_items=in_maintenance,
        out_of_service_items=out_of_service,
    )


def _group_report(
    kind: ReportKind,
    records: Sequence[EquipmentRead],
    grouper: Callable[[Sequence[EquipmentRead]], dict[str, list[EquipmentRead]]],
    generated_at: Optional[datetime],
) -> GroupReport:
    groups = grouper(records)
    sections = [
        GroupSection(
            name=name,
            total=len(items),
            available=len(query.filter_by(items, status=EquipmentStatus.AVAILABLE)),
            items=items,
        )
        for name, items in groups.items()
    ]
    average = round(len(records) / len(groups), 1) if groups else None
    return GroupReport(
        kind=kind,
        generated_at=_now(generated_at),
        total=len(records),
        group_count=len(groups),
        average_per_group=average,
        sections=sections,
    )


def location_report(
    records: Sequence[EquipmentRead], generated_at: Optional[datetime] = None
) -> GroupReport:
    return _group_report(ReportKind.LOCATION, records, query.group_by_location, generated_at)


def type_report(
    records: Sequence[EquipmentRead], generated_at: Optional[datetime] = None
) -> GroupReport:
    return _group_report(ReportKind.TYPE, records, query.group_by_type, generated_at)


def out_of_service_report(
    records: Sequence[EquipmentRead], generated_at: Optional[datetime] = None
) -> OutOfServiceReport:
    out_of_service = query.filter_by(records, status=EquipmentStatus.OUT_OF_SERVICE)
    in_maintenance = query.filter_by(records, status=EquipmentStatus.MAINTENANCE)
    unavailable = len(out_of_service) + len(in_maintenance)
    return OutOfServiceReport(
        generated_at=_now(generated_at),
        total=len(records),
        out_of_service_count=len(out_of_service),
        maintenance_count=len(in_maintenance),
        total_unavailable=unavailable,
        unavailable_percent=_pct(unavailable, len(records)),
        out_of_service_items=out_of_service,
        maintenance_items=in_maintenance,
    )


_READINESS_CATEGORIES = (
    ("Available for Use", EquipmentStatus.AVAILABLE),
    ("In Maintenance", EquipmentStatus.MAINTENANCE),
    ("Out of Service", EquipmentStatus.OUT_OF_SERVICE),
)


def compliance_report(
    records: Sequence[EquipmentRead], generated_at: Optional[datetime] = None
) -> ComplianceReport:
    counts = query.count_by_status(records)
    total = len(records)
    score = query.compliance_score(records)
    missing = query.missing_serial(records)
    return ComplianceReport(
        generated_at=_now(generated_at),
        total=total,
        compliance_score=None if math.isnan(score) else round(score, 1),
        operational_ready=counts[EquipmentStatus.AVAILABLE],
        missing_serial_count=len(missing),
        needs_attention=counts[EquipmentStatus.OUT_OF_SERVICE] + counts[EquipmentStatus.MAINTENANCE],
        missing_serial_items=missing,
        readiness=[
            ReadinessRow(category=label, status=status, count=counts[status], percent=_pct(counts[status], total))
            for label, status in _READINESS_CATEGORIES
        ],
    )


_BUILDERS: dict[ReportKind, Callable[..., ReportBase]] = {
    ReportKind.STATUS: status_report,
    ReportKind.MAINTENANCE: maintenance_report,
    ReportKind.LOCATION: location_report,
    ReportKind.TYPE: type_report,
    ReportKind.OUT_OF_SERVICE: out_of_service_report,
    ReportKind.COMPLIANCE: compliance_report,
}


def build_report(
    kind: ReportKind | str,
    records: Sequence[EquipmentRead],
    generated_at: Optional[datetime] = None,
) -> ReportBase:
    """Build the report named by ``kind`` (e.g. ``"compliance"``)."""
    return _BUILDERS[ReportKind(kind)](records, generated_at=generated_at)


__all__ = [
    "ReportKind",
    "ReportBase",
    "StatusReport",
    "MaintenanceReport",
    "GroupSection",
    "GroupReport",
    "OutOfServiceReport",
    "ReadinessRow",
    "ComplianceReport",
    "status_report",
    "maintenance_report",
    "location_report",
    "type_report",
    "out_of_service_report",
    "compliance_report",
    "build_report",
]
