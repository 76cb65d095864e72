"""Unit tests for crud/database.py"""

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel

from mdimport.core.models import FirstChildOf
from mdimport.crud.database import ensure_root, init_db, make_engine, open_backend, reset_db
from mdimport.crud.models import Page
from mdimport.crud.pages import get_children
from mdimport.crud.sql_backend import SQLBackend


SQLITE_MEM = "sqlite://"


def test_make_engine_returns_engine():
    assert isinstance(make_engine(SQLITE_MEM), Engine)


def test_init_db_creates_tables():
    engine = make_engine(SQLITE_MEM)
    init_db(engine)
    for name in ("pages", "content_elements"):
        assert name in SQLModel.metadata.tables


def test_reset_db_clears_rows(engine):
    with Session(engine) as s:
        ensure_root(s, 3)
    reset_db(engine)
    with Session(engine) as s:
        assert s.get(Page, 3) is None


def test_ensure_root_seeds_placeholder(engine):
    with Session(engine) as s:
        ensure_root(s, 7)
        ensure_root(s, 7)
        root = s.get(Page, 7)
        assert root.container_id == 0
        assert root.slug == "/"
        assert len(get_children(s, 0)) == 1


def test_ensure_root_zero_is_noop(engine):
    with Session(engine) as s:
        ensure_root(s, 0)
        assert get_children(s, 0) == []


def test_open_backend_persists(tmp_path):
    """Records committed through open_backend survive the run."""
    url = f"sqlite:///{tmp_path}/site.db"
    with open_backend(url, root_id=1) as backend:
        assert isinstance(backend, SQLBackend)
        page_id = backend.create_page(
            {"title": "Home", "slug": "/home", "sorting": 100, "container_id": 1}, FirstChildOf(1),
        )

    engine = make_engine(url)
    with Session(engine) as s:
        assert s.get(Page, page_id).title == "Home"
        assert s.get(Page, 1).title == "Root"
    engine.dispose()
