"""CSV export and re-import of the inventory."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import astuple, dataclass, fields
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Sequence

import pydantic

from equipment_tracker.core.config import settings
from equipment_tracker.core.errors import ValidationError
from equipment_tracker.models import EquipmentCreate, EquipmentRead

logger = logging.getLogger(__name__)

CSV_HEADER = (
    "Name",
    "Type",
    "Location",
    "Status",
    "Serial Number",
    "Notes",
    "Added Date",
    "Last Updated",
)


@dataclass(frozen=True)
class CsvRow:
    name: str
    type: str
    location: str
    status: str
    serial_number: str
    notes: str
    added_date: str
    last_updated: str


def _format_date(value: datetime) -> str:
    return value.date().isoformat()


def to_row(record: EquipmentRead) -> CsvRow:
    """Flatten a record the way it is written to CSV (commas in notes become semicolons)."""
    return CsvRow(
        name=record.name,
        type=record.type,
        location=record.location,
        status=record.status.value,
        serial_number=record.serial_number or "",
        notes=(record.notes or "").replace(",", ";"),
        added_date=_format_date(record.created_at),
        last_updated=_format_date(record.updated_at),
    )


def export_csv(records: Iterable[EquipmentRead]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for record in records:
        writer.writerow(astuple(to_row(record)))
    return buffer.getvalue()


def default_export_filename(today: date | None = None) -> str:
    day = today or date.today()
    return f"{settings.export_filename_prefix}-{day.isoformat()}.csv"


def write_csv(records: Sequence[EquipmentRead], path: str | Path) -> Path:
    target = Path(path)
    target.write_text(export_csv(records), encoding="utf-8", newline="")
    logger.info("Exported %d equipment records to %s", len(records), target)
    return target


def parse_csv(text: str) -> list[CsvRow]:
    """Parse an export back into rows; the header must match exactly."""

    reader = csv.reader(io.StringIO(text.removeprefix("\ufeff")))
    header = next(reader, None)
    if header is None or tuple(header) != CSV_HEADER:
        raise ValidationError(f"unexpected CSV header: {header!r}", fields=("header",))

    expected = len(fields(CsvRow))
    rows = []
    for line_no, values in enumerate(reader, start=2):
        if not values:
            continue
        if len(values) != expected:
            raise ValidationError(
                f"line {line_no}: expected {expected} columns, got {len(values)}",
                fields=(f"line {line_no}",),
            )
        rows.append(CsvRow(*values))
    return rows


def _row_payload(row: CsvRow) -> dict:
    return {
        "name": row.name,
        "type": row.type,
        "location": row.location,
        "status": row.status,
        "serial_number": row.serial_number or None,
        "notes": row.notes or None,
    }


def import_rows(store, rows: Iterable[CsvRow]) -> list[int]:
    """Create one record per parsed row; dates are reassigned by the store.

    Every row is validated first, so a bad row anywhere in the file leaves the
    store untouched.
    """

    payloads = []
    bad_rows: list[str] = []
    problems: list[str] = []
    for number, row in enumerate(rows, start=1):
        try:
            payloads.append(EquipmentCreate.model_validate(_row_payload(row)))
        except pydantic.ValidationError as exc:
            bad_rows.append(f"row {number}")
            problems.append(f"row {number}: {ValidationError.from_pydantic(exc).message}")
    if problems:
        raise ValidationError("; ".join(problems), fields=bad_rows)

    created = [store.create(payload) for payload in payloads]
    logger.info("Imported %d equipment records", len(created))
    return created


__all__ = [
    "CSV_HEADER",
    "CsvRow",
    "to_row",
    "export_csv",
    "default_export_filename",
    "write_csv",
    "parse_csv",
    "import_rows",
]
