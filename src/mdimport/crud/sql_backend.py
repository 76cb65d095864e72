"""SQLModel-backed Backend: every created record is committed on its own"""

import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from mdimport.core.models import FirstChildOf, Placement
from mdimport.crud.backend import Backend, resolve_placement, validate_block, validate_page
from mdimport.crud.models import ContentElement, Page
from mdimport.errors import RecordRejected


logger = logging.getLogger(__name__)


class SQLBackend(Backend):
    def __init__(self, session: Session):
        self.session = session

    def _lookup(self, model):
        def lookup(record_id: int) -> Optional[tuple[int, int]]:
            row = self.session.get(model, record_id)
            return (row.container_id, row.sorting) if row else None
        return lookup

    def _children(self, model):
        def children(container_id: int) -> list[tuple[int, int]]:
            stmt = (
                select(model.id, model.sorting)
                .where(model.container_id == container_id)
                .order_by(model.sorting, model.id)
            )
            return [(row_id, sorting) for row_id, sorting in self.session.exec(stmt).all()]
        return children

    def _place(self, model, record: dict[str, Any], placement: Placement, errors: list[str]):
        container_id, sorting, shifts = resolve_placement(
            placement, record.get("sorting", 0), self._lookup(model), self._children(model), errors,
        )
        if errors:
            raise RecordRejected(errors)
        # Pending until the new record's commit.
        for row_id, new_sorting in shifts.items():
            row = self.session.get(model, row_id)
            row.sorting = new_sorting
            self.session.add(row)
        if shifts:
            logger.debug("Moved %d %s record(s) behind the new one", len(shifts), model.__tablename__)
        return container_id, sorting

    def _insert(self, row) -> int:
        try:
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise RecordRejected([f"database error: {e}"]) from e
        return row.id

    def create_page(self, record: dict[str, Any], placement: Placement) -> int:
        errors = validate_page(record)
        if isinstance(placement, FirstChildOf) and placement.container_id != 0 \
                and self.session.get(Page, placement.container_id) is None:
            errors.append(f"container page {placement.container_id} does not exist")
        container_id, sorting = self._place(Page, record, placement, errors)
        page_id = self._insert(Page(**{**record, "container_id": container_id, "sorting": sorting}))
        logger.debug("Created page %d (%s) in container %d", page_id, record.get("slug"), container_id)
        return page_id

    def create_block(self, record: dict[str, Any], placement: Placement) -> int:
        errors = validate_block(record)
        if isinstance(placement, FirstChildOf) and self.session.get(Page, placement.container_id) is None:
            errors.append(f"container page {placement.container_id} does not exist")
        container_id, sorting = self._place(ContentElement, record, placement, errors)
        block_id = self._insert(ContentElement(**{**record, "container_id": container_id, "sorting": sorting}))
        logger.debug("Created content element %d on page %d", block_id, container_id)
        return block_id
