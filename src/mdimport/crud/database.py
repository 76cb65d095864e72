"""Database engine setup, schema creation, and per-run backend sessions"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from mdimport.crud.models import Page
from mdimport.crud.sql_backend import SQLBackend


logger = logging.getLogger(__name__)


def make_engine(db_url: str) -> Engine:
    """Create a SQLAlchemy engine for db_url."""
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    return create_engine(db_url, echo=False, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    """Create all tables (no-op if they already exist)."""
    SQLModel.metadata.create_all(engine)


def reset_db(engine: Engine) -> None:
    """Drop and recreate all tables."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)


def ensure_root(session: Session, root_id: int) -> None:
    """Create a placeholder root page with id root_id if none exists; 0 is the virtual top."""
    if root_id <= 0 or session.get(Page, root_id) is not None:
        return
    session.add(Page(id=root_id, container_id=0, title="Root", slug="/", sorting=0))
    session.commit()
    logger.info("Created placeholder root page %d", root_id)


@contextmanager
def open_backend(db_url: str, root_id: int = 0) -> Iterator[SQLBackend]:
    """Acquire a SQLBackend for one import run; released when the run completes or fails."""
    engine = make_engine(db_url)
    init_db(engine)
    try:
        with Session(engine) as session:
            logger.debug("Opened backend session on %s", db_url)
            ensure_root(session, root_id)
            yield SQLBackend(session)
    finally:
        engine.dispose()
