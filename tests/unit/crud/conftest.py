"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from mdimport.crud.database import ensure_root
from mdimport.crud.sql_backend import SQLBackend


ROOT_ID = 1


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test with the placeholder root page seeded."""
    with Session(engine) as s:
        ensure_root(s, ROOT_ID)
        yield s


@pytest.fixture(name="backend")
def backend_fixture(session):
    return SQLBackend(session)


def page_record(title: str, sorting: int = 100, container_id: int = ROOT_ID, **extra) -> dict:
    """Page record as produced by build_page_record."""
    return {
        "container_id": container_id,
        "title": title,
        "slug": "/" + title.lower(),
        "hidden": False,
        "page_type": "standard",
        "sorting": sorting,
        **extra,
    }


def block_record(container_id: int, sorting: int = 100, kind: str = "text", **extra) -> dict:
    """Content element record as produced by transform_block."""
    return {"container_id": container_id, "zone": 0, "sorting": sorting, "kind": kind, "header": "", "body": "", **extra}


@pytest.fixture(name="page_record")
def page_record_fixture():
    return page_record


@pytest.fixture(name="block_record")
def block_record_fixture():
    return block_record
