"""Filtering and aggregation over equipment snapshots.

All functions here are pure: they read the sequence they are given, never
mutate it, and return new containers. Identical input (including order)
gives identical output.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Protocol, Sequence, TypeVar

from equipment_tracker.models import EquipmentStatus


class EquipmentLike(Protocol):
    name: str
    type: str
    location: str
    status: EquipmentStatus
    serial_number: Optional[str]


R = TypeVar("R", bound=EquipmentLike)


def _coerce_status(status: EquipmentStatus | str) -> EquipmentStatus:
    # ValueError for anything outside the enumeration
    return EquipmentStatus(status)


def _matches_text(record: EquipmentLike, needle: str) -> bool:
    haystack = (record.name, record.type, record.location, record.serial_number or "")
    return any(needle in value.lower() for value in haystack)


def filter_by(
    records: Iterable[R],
    *,
    text_query: Optional[str] = None,
    status: EquipmentStatus | str | None = None,
    equipment_type: Optional[str] = None,
) -> list[R]:
    """Return the records matching every supplied criterion, in input order.

    ``text_query`` is a case-insensitive substring match against name, type,
    location and serial number. ``status`` and ``equipment_type`` are exact
    matches. Empty or missing criteria do not filter anything.
    """

    needle = text_query.lower() if text_query else None
    wanted_status = _coerce_status(status) if status else None

    result = []
    for record in records:
        if needle and not _matches_text(record, needle):
            continue
        if wanted_status is not None and record.status != wanted_status:
            continue
        if equipment_type and record.type != equipment_type:
            continue
        result.append(record)
    return result


def count_by_status(records: Iterable[EquipmentLike]) -> dict[EquipmentStatus, int]:
    counts = {status: 0 for status in EquipmentStatus}
    for record in records:
        counts[_coerce_status(record.status)] += 1
    return counts


def _group_by(records: Iterable[R], key) -> dict[str, list[R]]:
    groups: dict[str, list[R]] = {}
    for record in records:
        groups.setdefault(key(record), []).append(record)
    return {name: groups[name] for name in sorted(groups)}


def group_by_location(records: Iterable[R]) -> dict[str, list[R]]:
    """Group by location; keys sorted, each group in input order."""
    return _group_by(records, lambda record: record.location)


def group_by_type(records: Iterable[R]) -> dict[str, list[R]]:
    """Group by equipment type; keys sorted, each group in input order."""
    return _group_by(records, lambda record: record.type)


def missing_serial(records: Iterable[R]) -> list[R]:
    return [r for r in records if not (r.serial_number and r.serial_number.strip())]


def percentage(count: int, total: int) -> float:
    """``count / total * 100``; NaN when ``total`` is zero."""
    if total == 0:
        return math.nan
    return count / total * 100


def compliance_score(records: Sequence[EquipmentLike]) -> float:
    """Readiness percentage: items with a serial number that are not out of service.

    Computed as ``(total - missing_serial - out_of_service) / total * 100``,
    where an out-of-service item without a serial number is counted once,
    under out_of_service, so the score never drops below zero. Returns NaN
    for an empty fleet; callers must check with ``math.isnan`` before
    presenting the value.
    """

    total = len(records)
    out_of_service = [r for r in records if r.status == EquipmentStatus.OUT_OF_SERVICE]
    in_service = [r for r in records if r.status != EquipmentStatus.OUT_OF_SERVICE]
    missing = len(missing_serial(in_service))
    return percentage(total - missing - len(out_of_service), total)


def availability_percent(records: Sequence[EquipmentLike]) -> dict[EquipmentStatus, float]:
    """Share of the fleet in each status bucket, NaN throughout for an empty fleet."""
    total = len(records)
    return {status: percentage(count, total) for status, count in count_by_status(records).items()}


__all__ = [
    "filter_by",
    "count_by_status",
    "group_by_location",
    "group_by_type",
    "missing_serial",
    "percentage",
    "compliance_score",
    "availability_percent",
]
