"""Local, durable record store for equipment items."""

from __future__ import annotations

import logging
import threading
from typing import Any, Mapping, Optional

import pydantic
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, func, select

from equipment_tracker.core.config import settings
from equipment_tracker.core.errors import NotFound, StorageUnavailable, ValidationError
from equipment_tracker.db.session import build_engine, get_session, init_db
from equipment_tracker.models import (
    EquipmentCreate,
    EquipmentRead,
    EquipmentRecord,
    EquipmentUpdate,
    utcnow,
)

logger = logging.getLogger(__name__)

# SQLite INTEGER PRIMARY KEY is a signed 64-bit value
_MIN_ID = -(2**63)
_MAX_ID = 2**63 - 1


def _validate(model: type[pydantic.BaseModel], fields: Mapping[str, Any] | pydantic.BaseModel):
    if isinstance(fields, model):
        return fields
    if isinstance(fields, pydantic.BaseModel):
        fields = fields.model_dump(exclude_unset=True)
    try:
        return model.model_validate(dict(fields))
    except pydantic.ValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc


def _load(session: Session, record_id: int) -> EquipmentRecord:
    if not _MIN_ID <= record_id <= _MAX_ID:
        raise NotFound(record_id)
    record = session.get(EquipmentRecord, record_id)
    if record is None:
        raise NotFound(record_id)
    return record


class EquipmentStore:
    """Owns the equipment table.

    Every read returns detached ``EquipmentRead`` snapshots, so callers never
    hold a live reference into the session. Each call commits before it
    returns; a read issued after a write on the same store sees that write.
    """

    def __init__(self, database_url: str | None = None, echo: bool | None = None) -> None:
        self.database_url = database_url or settings.database_url
        self._echo = settings.sql_echo if echo is None else echo
        self._engine: Optional[Engine] = None
        self._lock = threading.Lock()

    # -- lifecycle --

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def open(self) -> "EquipmentStore":
        """Create the engine and any missing tables. Safe to call repeatedly."""

        with self._lock:
            if self._engine is not None:
                return self
            try:
                engine = build_engine(self.database_url, echo=self._echo)
                init_db(engine)
            except (SQLAlchemyError, OSError) as exc:
                logger.error("Failed to open equipment store at %s: %s", self.database_url, exc)
                raise StorageUnavailable(f"cannot open {self.database_url}: {exc}") from exc
            self._engine = engine
            logger.info("Equipment store opened", extra={"database_url": self.database_url})
            return self

    def close(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
                logger.info("Equipment store closed", extra={"database_url": self.database_url})

    def __enter__(self) -> "EquipmentStore":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _run(self, action: str, fn):
        with self._lock:
            if self._engine is None:
                raise StorageUnavailable("equipment store is not open")
            try:
                with get_session(self._engine) as session:
                    return fn(session)
            except SQLAlchemyError as exc:
                logger.error("Storage failure during %s: %s", action, exc)
                raise StorageUnavailable(f"{action} failed: {exc}") from exc

    # -- operations --

    def create(self, fields: Mapping[str, Any] | EquipmentCreate) -> int:
        payload = _validate(EquipmentCreate, fields)

        def _create(session: Session) -> int:
            now = utcnow()
            record = EquipmentRecord(**payload.model_dump(), created_at=now, updated_at=now)
            session.add(record)
            session.commit()
            session.refresh(record)
            return record.id

        record_id = self._run("create", _create)
        logger.info("Equipment added", extra={"equipment_id": record_id, "equipment_name": payload.name})
        return record_id

    def get(self, record_id: int) -> EquipmentRead:
        def _get(session: Session) -> EquipmentRead:
            record = _load(session, record_id)
            return EquipmentRead.model_validate(record)

        return self._run("get", _get)

    def update(self, record_id: int, fields: Mapping[str, Any] | EquipmentUpdate) -> None:
        changes = _validate(EquipmentUpdate, fields).changes()

        def _update(session: Session) -> None:
            record = _load(session, record_id)
            for key, value in changes.items():
                setattr(record, key, value)
            record.updated_at = max(utcnow(), record.created_at)
            session.add(record)
            session.commit()

        self._run("update", _update)
        logger.info("Equipment updated", extra={"equipment_id": record_id, "fields": sorted(changes)})

    def delete(self, record_id: int) -> None:
        def _delete(session: Session) -> None:
            record = _load(session, record_id)
            session.delete(record)
            session.commit()

        self._run("delete", _delete)
        logger.info("Equipment deleted", extra={"equipment_id": record_id})

    def list_all(self) -> list[EquipmentRead]:
        def _list(session: Session) -> list[EquipmentRead]:
            rows = session.exec(select(EquipmentRecord).order_by(EquipmentRecord.id)).all()
            return [EquipmentRead.model_validate(row) for row in rows]

        return self._run("list_all", _list)

    def count(self) -> int:
        def _count(session: Session) -> int:
            return session.exec(select(func.count()).select_from(EquipmentRecord)).one()

        return self._run("count", _count)


__all__ = ["EquipmentStore"]
