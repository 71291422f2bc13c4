"""Command line front end for the equipment tracker."""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any, Sequence

from equipment_tracker.core.config import settings
from equipment_tracker.core.errors import NotFound, StorageUnavailable, ValidationError
from equipment_tracker.core.logging_config import setup_logging
from equipment_tracker.models import EquipmentRead, EquipmentStatus
from equipment_tracker.services import export, query
from equipment_tracker.services.poller import poll_inventory
from equipment_tracker.services.reports import ReportKind, build_report
from equipment_tracker.services.store import EquipmentStore

logger = logging.getLogger(__name__)

STATUS_CHOICES = [status.value for status in EquipmentStatus]


def _add_field_arguments(parser: argparse.ArgumentParser, required: bool) -> None:
    parser.add_argument("--name", required=required, help="Equipment name, e.g. 'Ladder 1'.")
    parser.add_argument("--type", dest="equipment_type", required=required, help="Equipment type.")
    parser.add_argument("--location", required=required, help="Station or storage location.")
    parser.add_argument("--status", required=required, choices=STATUS_CHOICES)
    parser.add_argument("--serial", dest="serial_number", help="Serial number (optional).")
    parser.add_argument("--notes", help="Free-form notes (optional).")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="equipment-tracker", description="Track equipment status, location and readiness."
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help=f"SQLAlchemy database URL (defaults to {settings.database_url}).",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL (e.g. INFO, DEBUG).")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add a new equipment item.")
    _add_field_arguments(add, required=True)

    show = sub.add_parser("show", help="Show a single item as JSON.")
    show.add_argument("id", type=int)

    update = sub.add_parser("update", help="Change selected fields of an item.")
    update.add_argument("id", type=int)
    _add_field_arguments(update, required=False)

    delete = sub.add_parser("delete", help="Delete an item permanently.")
    delete.add_argument("id", type=int)

    listing = sub.add_parser("list", help="List items, optionally filtered.")
    listing.add_argument("--search", help="Case-insensitive match on name, type, location or serial.")
    listing.add_argument("--status", choices=STATUS_CHOICES)
    listing.add_argument("--type", dest="equipment_type")
    listing.add_argument("--json", action="store_true", help="Print JSON instead of a table.")

    sub.add_parser("stats", help="Show totals per status.")

    report = sub.add_parser("report", help="Print a report as JSON.")
    report.add_argument("kind", choices=[kind.value for kind in ReportKind])

    exporter = sub.add_parser("export", help="Export all items to CSV.")
    exporter.add_argument("--output", type=Path, help="Target file (defaults to a dated filename).")

    importer = sub.add_parser("import", help="Import items from a CSV export.")
    importer.add_argument("file", type=Path)

    watch = sub.add_parser("watch", help="Re-read the inventory periodically and print totals.")
    watch.add_argument("--interval", type=float, help="Seconds between refreshes (defaults to settings).")
    watch.add_argument("--iterations", type=int, help="Stop after this many refreshes.")
    return parser


def _field_values(args: argparse.Namespace) -> dict[str, Any]:
    values = {
        "name": args.name,
        "type": args.equipment_type,
        "location": args.location,
        "status": args.status,
        "serial_number": args.serial_number,
        "notes": args.notes,
    }
    return {key: value for key, value in values.items() if value is not None}


def _format_table(records: Sequence[EquipmentRead]) -> str:
    if not records:
        return "No equipment found."
    lines = [f"{'ID':>4}  {'Name':<24} {'Type':<16} {'Location':<18} {'Status':<15} Serial #"]
    for r in records:
        lines.append(
            f"{r.id:>4}  {r.name:<24} {r.type:<16} {r.location:<18} {r.status.value:<15} {r.serial_number or 'N/A'}"
        )
    return "\n".join(lines)


def _format_stats(records: Sequence[EquipmentRead]) -> str:
    counts = query.count_by_status(records)
    parts = [f"Total: {len(records)}"] + [f"{status.value}: {count}" for status, count in counts.items()]
    score = query.compliance_score(records)
    parts.append("Compliance: n/a" if math.isnan(score) else f"Compliance: {score:.1f}%")
    return " | ".join(parts)


def _run(args: argparse.Namespace, store: EquipmentStore) -> int:
    if args.command == "add":
        record_id = store.create(_field_values(args))
        print(f"Equipment added successfully (id={record_id})")
        return 0

    if args.command == "show":
        print(store.get(args.id).model_dump_json(indent=2))
        return 0

    if args.command == "update":
        changes = _field_values(args)
        if not changes:
            print("Nothing to update: pass at least one field.", file=sys.stderr)
            return 1
        store.update(args.id, changes)
        print(f"Equipment updated successfully (id={args.id})")
        return 0

    if args.command == "delete":
        store.delete(args.id)
        print(f"Equipment deleted (id={args.id})")
        return 0

    if args.command == "list":
        records = query.filter_by(
            store.list_all(),
            text_query=args.search,
            status=args.status,
            equipment_type=args.equipment_type,
        )
        if args.json:
            print(json.dumps([r.model_dump(mode="json") for r in records], indent=2))
        else:
            print(_format_table(records))
        return 0

    if args.command == "stats":
        print(_format_stats(store.list_all()))
        return 0

    if args.command == "report":
        print(build_report(args.kind, store.list_all()).model_dump_json(indent=2))
        return 0

    if args.command == "export":
        records = store.list_all()
        if not records:
            print("No equipment data to export", file=sys.stderr)
            return 1
        target = export.write_csv(records, args.output or Path(export.default_export_filename()))
        print(f"Exported {len(records)} records to {target}")
        return 0

    if args.command == "import":
        rows = export.parse_csv(args.file.read_text(encoding="utf-8-sig"))
        created = export.import_rows(store, rows)
        print(f"Imported {len(created)} records")
        return 0

    if args.command == "watch":
        poll_inventory(
            store,
            lambda records: print(_format_stats(records), flush=True),
            interval=args.interval,
            iterations=args.iterations,
        )
        return 0

    raise ValueError(f"unknown command {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level)

    try:
        with EquipmentStore(args.database_url) as store:
            return _run(args, store)
    except (ValidationError, NotFound) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except StorageUnavailable as exc:
        logger.error("Storage unavailable: %s", exc)
        print(f"Cannot proceed, storage unavailable: {exc}", file=sys.stderr)
        return 2
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
