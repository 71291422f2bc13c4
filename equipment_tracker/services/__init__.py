"""Service-layer utilities."""

from .export import CsvRow, export_csv, import_rows, parse_csv, write_csv
from .poller import poll_inventory
from .query import (
    availability_percent,
    compliance_score,
    count_by_status,
    filter_by,
    group_by_location,
    group_by_type,
    missing_serial,
)
from .reports import ReportKind, build_report
from .store import EquipmentStore

__all__ = [
    "EquipmentStore",
    "filter_by",
    "count_by_status",
    "group_by_location",
    "group_by_type",
    "missing_serial",
    "compliance_score",
    "availability_percent",
    "ReportKind",
    "build_report",
    "CsvRow",
    "export_csv",
    "write_csv",
    "parse_csv",
    "import_rows",
    "poll_inventory",
]
