"""SQLModel engine and session management."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy.engine import Engine, make_url
from sqlmodel import Session, SQLModel, create_engine


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine, making sure the directory of a SQLite file exists."""

    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
    return create_engine(database_url, echo=echo)


def init_db(engine: Engine) -> None:
    """Create missing tables; existing tables and rows are left untouched."""

    # Register table models on SQLModel.metadata before create_all
    from equipment_tracker import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


@contextmanager
def get_session(engine: Engine) -> Iterator[Session]:
    """Get a database session as a context manager (for use with 'with' statement)."""
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()
