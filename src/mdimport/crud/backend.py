"""Backend contract: create a record at a placement, return its id, reject with errors"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from mdimport.core.models import After, FirstChildOf, Placement


# (container_id, sorting) of an existing record, or None if it does not exist
SiblingLookup = Callable[[int], Optional[tuple[int, int]]]
# (id, sorting) of the records in a container, ordered by sorting then id
ChildrenLookup = Callable[[int], list[tuple[int, int]]]


class Backend(ABC):
    @abstractmethod
    def create_page(self, record: dict[str, Any], placement: Placement) -> int:
        """Create a page; return its id or raise RecordRejected."""
        raise NotImplementedError

    @abstractmethod
    def create_block(self, record: dict[str, Any], placement: Placement) -> int:
        """Create a content element; return its id or raise RecordRejected."""
        raise NotImplementedError


def validate_page(record: dict[str, Any]) -> list[str]:
    errors = []
    if not str(record.get("title") or "").strip():
        errors.append("page title is required")
    return errors


def validate_block(record: dict[str, Any]) -> list[str]:
    errors = []
    if not record.get("kind"):
        errors.append("content element kind is required")
    return errors


def _shift_after(rows: list[tuple[int, int]], sorting: int) -> dict[int, int]:
    """New sortings that move rows (ordered by sorting, id) strictly past sorting, keeping their order."""
    if not rows or rows[0][1] > sorting:
        return {}
    delta = sorting - rows[0][1] + 1
    return {row_id: row_sorting + delta for row_id, row_sorting in rows}


def resolve_placement(
    placement: Placement,
    sorting: int,
    lookup: SiblingLookup,
    children: ChildrenLookup,
    errors: list[str],
    ) -> tuple[Optional[int], int, dict[int, int]]:
    """Translate a Placement into (container_id, sorting, shifts).

    FirstChildOf keeps the record's sorting and pushes the container's
    existing children behind it. After moves the record into the sibling's
    container with a sorting strictly greater than the sibling's and pushes
    the records that followed the sibling behind it. shifts maps existing
    record ids to their new sorting. Problems are appended to errors and
    (None, sorting, {}) is returned.
    """
    if isinstance(placement, FirstChildOf):
        container_id = placement.container_id
        return container_id, sorting, _shift_after(children(container_id), sorting)
    if isinstance(placement, After):
        sibling = lookup(placement.sibling_id)
        if sibling is None:
            errors.append(f"sibling record {placement.sibling_id} does not exist")
            return None, sorting, {}
        container_id, sibling_sorting = sibling
        sorting = max(sorting, sibling_sorting + 1)
        anchor = (sibling_sorting, placement.sibling_id)
        later = [(row_id, s) for row_id, s in children(container_id) if (s, row_id) > anchor]
        return container_id, sorting, _shift_after(later, sorting)
    errors.append(f"unsupported placement {placement!r}")
    return None, sorting, {}
