"""Read helpers for stored pages and content elements"""

from typing import Iterator

from sqlmodel import Session, select

from mdimport.crud.models import ContentElement, Page


def get_children(session: Session, container_id: int) -> list[Page]:
    """Pages directly inside container_id, in display order."""
    stmt = select(Page).where(Page.container_id == container_id).order_by(Page.sorting, Page.id)
    return list(session.exec(stmt).all())


def get_blocks(session: Session, page_id: int) -> list[ContentElement]:
    """Content elements of a page, in display order."""
    stmt = (
        select(ContentElement)
        .where(ContentElement.container_id == page_id)
        .order_by(ContentElement.sorting, ContentElement.id)
    )
    return list(session.exec(stmt).all())


def get_by_slug(session: Session, slug: str) -> Page | None:
    """Return the first page stored with the given slug, or None."""
    return session.exec(select(Page).where(Page.slug == slug)).first()


def walk_tree(session: Session, root_id: int, depth: int = 0) -> Iterator[tuple[int, Page]]:
    """Depth-first (depth, page) pairs below root_id."""
    for page in get_children(session, root_id):
        if page.id == root_id:
            continue
        yield depth, page
        yield from walk_tree(session, page.id, depth + 1)
