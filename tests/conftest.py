from __future__ import annotations

import logging
from datetime import datetime

import pytest

from equipment_tracker.core import logging_config
from equipment_tracker.models import EquipmentRead, EquipmentStatus
from equipment_tracker.services.store import EquipmentStore


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    logging_config.reset_logging()
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging_config.reset_logging()


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'equipment.db'}"


@pytest.fixture
def store(database_url):
    with EquipmentStore(database_url) as opened:
        yield opened


@pytest.fixture
def make_record():
    """Build detached snapshots without touching a database."""

    counter = {"id": 0}

    def _make(name="Ladder 1", type="Ladder", location="Station 1", status="Available", **extra) -> EquipmentRead:
        counter["id"] += 1
        stamp = datetime(2024, 3, 1, 12, 0, 0)
        return EquipmentRead(
            id=extra.pop("id", counter["id"]),
            name=name,
            type=type,
            location=location,
            status=EquipmentStatus(status),
            created_at=extra.pop("created_at", stamp),
            updated_at=extra.pop("updated_at", stamp),
            **extra,
        )

    return _make
