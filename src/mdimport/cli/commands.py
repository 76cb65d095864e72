"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from mdimport.config import Settings, load_config
from mdimport.core.hierarchy import HierarchyPolicy, build_plan
from mdimport.core.models import ParsedPage
from mdimport.core.parse import parse_dir
from mdimport.core.pipeline import run_import
from mdimport.crud.database import ensure_root, init_db, make_engine, open_backend, reset_db
from mdimport.crud.memory_backend import MemoryBackend
from mdimport.crud.pages import get_blocks, walk_tree
from mdimport.errors import BackendWriteFailure, DocumentError


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _configure_logging(level: str) -> None:
    """Route library loggers to stderr at the configured level."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _settings(overrides: dict = None) -> Settings:
    """Load config; invalid files or values exit 1 before any work starts."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail("Invalid configuration", e)
    _configure_logging(settings.log_level)
    return settings


def _load_pages(path: str, settings: Settings) -> list[ParsedPage]:
    """Parse a source directory; missing directory, parse errors, and no files all exit 1."""
    source = Path(path)
    if not source.is_dir():
        _fail(f"Directory not found: {path}")
    try:
        pages = parse_dir(source, settings.extensions)
    except DocumentError as e:
        _fail("Parse failed", e)
    if not pages:
        typer.echo(f"Warning: No Markdown files found in: {path}", err=True)
        raise typer.Exit(1)
    return pages


def import_cmd(
    path: Annotated[str, typer.Argument(help="Directory containing Markdown files")],
    root_id: Annotated[Optional[int], typer.Option("--root-id", "-r", help="Container id for top-level pages")] = None,
    hierarchy: Annotated[Optional[str], typer.Option("--hierarchy", help="Parent convention: flat or rooted")] = None,
    fallback_id: Annotated[Optional[int], typer.Option("--fallback-id", help="Container for pages with unresolved parents")] = None,
    db_url: Annotated[Optional[str], typer.Option("--db-url", help="Database URL (or set MDIMPORT_DB_URL)")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Run against an in-memory backend; nothing is stored")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log every created record")] = False,
    ):
    """Import Markdown files as pages and content blocks."""
    settings = _settings(overrides={
        "root_id": root_id, "hierarchy": hierarchy, "fallback_id": fallback_id,
        "db_url": db_url, "log_level": "DEBUG" if verbose else None,
    })
    typer.echo(f"Importing from: {Path(path).resolve()}")
    typer.echo(f"Root container: {settings.root_id} ({settings.hierarchy} hierarchy)")

    pages = _load_pages(path, settings)
    typer.echo(f"Found {len(pages)} page(s) to import.")

    try:
        if dry_run:
            result = run_import(pages, MemoryBackend(), settings)
        else:
            with open_backend(settings.db_url, settings.root_id) as backend:
                result = run_import(pages, backend, settings)
    except BackendWriteFailure as e:
        _fail("Import aborted", e)

    total = len(result.titles)
    for i, title in enumerate(result.titles, start=1):
        typer.echo(f"[{i}/{total}] {title} ✓")
    for title in result.unresolved:
        typer.echo(f"Warning: parent of '{title}' not found; placed in container {settings.fallback_container}", err=True)
    suffix = " (dry run, nothing stored)" if dry_run else ""
    typer.echo(f"{total} pages imported successfully.{suffix}")


def plan_cmd(
    path: Annotated[str, typer.Argument(help="Directory containing Markdown files")],
    hierarchy: Annotated[Optional[str], typer.Option("--hierarchy", help="Parent convention: flat or rooted")] = None,
    ):
    """Show the page creation order and classes without writing anything."""
    settings = _settings(overrides={"hierarchy": hierarchy})
    pages = _load_pages(path, settings)
    for i, entry in enumerate(build_plan(pages, HierarchyPolicy(settings.hierarchy)), start=1):
        parent = f"/{entry.parent}" if entry.parent is not None else "-"
        indent = "  " * entry.depth
        typer.echo(f"{i:>3}. {indent}{entry.page.title}  [{entry.page_class.value}, parent {parent}, {len(entry.page.blocks)} block(s)]")


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    root_id: Annotated[Optional[int], typer.Option("--root-id", "-r", help="Create a placeholder root page with this id")] = None,
    ):
    """Initialize the backend schema. Use --reset to clear existing data."""
    settings = _settings(overrides={"root_id": root_id})
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    with Session(engine) as session:
        ensure_root(session, settings.root_id)
    typer.echo(f"Database initialized at: {settings.db_url}")


def tree_cmd(
    root_id: Annotated[Optional[int], typer.Option("--root-id", "-r", help="Container id to list from")] = None,
    ):
    """Print the stored page tree with content block counts."""
    settings = _settings(overrides={"root_id": root_id})
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        lines = [
            f"{'  ' * depth}{page.title} ({page.slug}) [{len(get_blocks(session, page.id))} block(s)]"
            for depth, page in walk_tree(session, settings.root_id)
        ]
    if not lines:
        typer.echo("No pages found.")
        raise typer.Exit(1)
    for line in lines:
        typer.echo(line)
