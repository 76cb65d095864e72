from dataclasses import dataclass, field
from typing import Any, Optional

from mdimport.core.models import FirstChildOf, Placement
from mdimport.crud.backend import Backend, resolve_placement, validate_block, validate_page
from mdimport.errors import RecordRejected


@dataclass
class MemoryBackend(Backend):
    """In-process backend; ids are allocated from a single counter across pages and blocks."""
    pages: dict[int, dict[str, Any]] = field(default_factory=dict)
    blocks: dict[int, dict[str, Any]] = field(default_factory=dict)
    placements: list[tuple[str, int, Placement]] = field(default_factory=list)
    next_id: int = 100

    def _allocate(self) -> int:
        new_id = self.next_id
        self.next_id += 1
        return new_id

    @staticmethod
    def _lookup(rows: dict[int, dict[str, Any]]):
        def lookup(record_id: int) -> Optional[tuple[int, int]]:
            row = rows.get(record_id)
            return (row["container_id"], row["sorting"]) if row else None
        return lookup

    @staticmethod
    def _children(rows: dict[int, dict[str, Any]]):
        def children(container_id: int) -> list[tuple[int, int]]:
            return sorted(
                ((r["id"], r["sorting"]) for r in rows.values() if r["container_id"] == container_id),
                key=lambda pair: (pair[1], pair[0]),
            )
        return children

    def _place(self, rows: dict[int, dict[str, Any]], record: dict[str, Any], placement: Placement, errors: list[str]):
        container_id, sorting, shifts = resolve_placement(
            placement, record.get("sorting", 0), self._lookup(rows), self._children(rows), errors,
        )
        if errors:
            raise RecordRejected(errors)
        for row_id, new_sorting in shifts.items():
            rows[row_id]["sorting"] = new_sorting
        return container_id, sorting

    def create_page(self, record: dict[str, Any], placement: Placement) -> int:
        errors = validate_page(record)
        container_id, sorting = self._place(self.pages, record, placement, errors)
        page_id = self._allocate()
        self.pages[page_id] = {**record, "id": page_id, "container_id": container_id, "sorting": sorting}
        self.placements.append(("page", page_id, placement))
        return page_id

    def create_block(self, record: dict[str, Any], placement: Placement) -> int:
        errors = validate_block(record)
        if isinstance(placement, FirstChildOf) and placement.container_id not in self.pages:
            errors.append(f"container page {placement.container_id} does not exist")
        container_id, sorting = self._place(self.blocks, record, placement, errors)
        block_id = self._allocate()
        self.blocks[block_id] = {**record, "id": block_id, "container_id": container_id, "sorting": sorting}
        self.placements.append(("block", block_id, placement))
        return block_id

    def children(self, container_id: int) -> list[dict[str, Any]]:
        """Pages in container_id ordered by sorting, then creation."""
        rows = [p for p in self.pages.values() if p["container_id"] == container_id]
        return sorted(rows, key=lambda p: (p["sorting"], p["id"]))

    def blocks_of(self, page_id: int) -> list[dict[str, Any]]:
        rows = [b for b in self.blocks.values() if b["container_id"] == page_id]
        return sorted(rows, key=lambda b: (b["sorting"], b["id"]))
