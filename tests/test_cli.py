from __future__ import annotations

import json

import pytest

from equipment_tracker import cli
from equipment_tracker.services.store import EquipmentStore


@pytest.fixture
def run(database_url, capsys):
    def _run(*argv):
        code = cli.main(["--database-url", database_url, *argv])
        captured = capsys.readouterr()
        return code, captured.out, captured.err

    return _run


def _add(run, name="Ladder 1", status="Available", **extra):
    argv = ["add", "--name", name, "--type", "Ladder", "--location", "Station 1", "--status", status]
    for flag, value in extra.items():
        argv += [f"--{flag}", value]
    return run(*argv)


def test_add_and_show(run):
    code, out, _ = _add(run, serial="LD-1")
    assert code == 0
    assert "id=1" in out

    code, out, _ = run("show", "1")
    assert code == 0
    payload = json.loads(out)
    assert payload["name"] == "Ladder 1"
    assert payload["serial_number"] == "LD-1"
    assert payload["status"] == "Available"


def test_update_and_delete(run, database_url):
    _add(run)
    code, _, _ = run("update", "1", "--status", "Maintenance")
    assert code == 0
    with EquipmentStore(database_url) as store:
        assert store.get(1).status.value == "Maintenance"

    assert run("delete", "1")[0] == 0
    code, _, err = run("show", "1")
    assert code == 1
    assert "not found" in err


def test_update_without_fields_is_rejected(run):
    _add(run)
    code, _, err = run("update", "1")
    assert code == 1
    assert "Nothing to update" in err


def test_list_filters(run):
    _add(run, name="Ladder 1")
    _add(run, name="Ladder 2", status="In Use")
    code, out, _ = run("list", "--status", "In Use", "--json")
    assert code == 0
    assert [item["name"] for item in json.loads(out)] == ["Ladder 2"]

    code, out, _ = run("list", "--search", "ladder 1")
    assert "Ladder 1" in out and "Ladder 2" not in out


def test_list_empty(run):
    code, out, _ = run("list")
    assert code == 0
    assert "No equipment found." in out


def test_stats_on_empty_store_does_not_crash(run):
    code, out, _ = run("stats")
    assert code == 0
    assert "Total: 0" in out
    assert "Compliance: n/a" in out


def test_report_prints_json(run):
    _add(run, serial="LD-1")
    code, out, _ = run("report", "compliance")
    assert code == 0
    assert json.loads(out)["compliance_score"] == 100.0


def test_export_and_import(run, tmp_path, database_url):
    _add(run, notes="left, right")
    target = tmp_path / "export.csv"
    code, out, _ = run("export", "--output", str(target))
    assert code == 0
    assert "Exported 1 records" in out
    assert '"left; right"' in target.read_text(encoding="utf-8")

    code, out, _ = run("import", str(target))
    assert code == 0
    with EquipmentStore(database_url) as store:
        assert store.count() == 2


def test_export_empty_store(run):
    code, _, err = run("export")
    assert code == 1
    assert "No equipment data to export" in err


def test_watch_polls_fixed_number_of_times(run):
    _add(run)
    code, out, _ = run("watch", "--interval", "0", "--iterations", "3")
    assert code == 0
    assert out.count("Total: 1") == 3


def test_storage_unavailable_exits_with_fatal_code(tmp_path, capsys):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    code = cli.main(["--database-url", f"sqlite:///{blocker / 'db.sqlite'}", "list"])
    assert code == 2
    assert "storage unavailable" in capsys.readouterr().err


def test_invalid_status_is_rejected_by_parser(run):
    with pytest.raises(SystemExit):
        run("add", "--name", "x", "--type", "y", "--location", "z", "--status", "Broken")


def test_show_id_beyond_integer_range_is_not_found(run):
    _add(run)
    code, _, err = run("show", str(2**70))
    assert code == 1
    assert "not found" in err


def test_import_accepts_byte_order_mark(run, tmp_path, database_url):
    _add(run)
    target = tmp_path / "export.csv"
    run("export", "--output", str(target))
    target.write_bytes(b"\xef\xbb\xbf" + target.read_bytes())

    code, out, _ = run("import", str(target))
    assert code == 0
    assert "Imported 1 records" in out
    with EquipmentStore(database_url) as store:
        assert store.count() == 2


def test_import_of_non_utf8_file_is_reported(run, tmp_path):
    target = tmp_path / "garbage.csv"
    target.write_bytes(b"\xff\xfe\xfa")
    code, _, err = run("import", str(target))
    assert code == 1
    assert "Error" in err
