"""Page classification, creation planning, and parent/sibling placement.

Pages carry no explicit tree, only a ``parent`` reference in their front
matter. Two conventions exist for what the top of that reference space means,
and a run has to choose one explicitly:

``flat``
    ``parent: ""`` and ``parent: "/"`` are both top-level pages, created in
    the import root container.

``rooted``
    ``parent: ""`` marks the site root page (created in the import root
    container); ``parent: "/"`` marks section pages, created inside the first
    root page.

Any other value (``/about``, ``/about/team``) names the slug of the parent page.
Sub-pages are planned by depth of their parent chain so that every parent that
exists in the input is created before its children. Within each sibling group
the input order (already sorted by ``nav_position``) is kept; the first sibling
is placed as first child of its container and every later one directly after
the previously created sibling.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from mdimport.core.models import After, FirstChildOf, ParsedPage, Placement


logger = logging.getLogger(__name__)


class HierarchyPolicy(str, Enum):
    flat = "flat"
    rooted = "rooted"


class PageClass(str, Enum):
    root = "root"
    section = "section"
    subpage = "subpage"


@dataclass(frozen=True)
class PlannedPage:
    page: ParsedPage
    page_class: PageClass
    parent: Optional[str] = None    # parent slug key, sub-pages only
    depth: int = 0                  # 0 for root/section pages, parent chain length for sub-pages

    @property
    def group(self) -> tuple[PageClass, str]:
        """Sibling group key: pages sharing it are chained one after another."""
        return self.page_class, self.parent or ""


def classify(page: ParsedPage, policy: HierarchyPolicy) -> PageClass:
    parent = page.parent
    if parent == "":
        return PageClass.root
    if parent == "/":
        return PageClass.root if policy is HierarchyPolicy.flat else PageClass.section
    return PageClass.subpage


def _subpage_depth(page: ParsedPage, by_slug: dict[str, ParsedPage], policy: HierarchyPolicy) -> int:
    """Length of the parent chain through sub-pages; unknown parents and cycles stop the walk."""
    depth, current, seen = 1, page, {id(page)}
    while True:
        parent = by_slug.get(current.parent_key)
        if parent is None or id(parent) in seen or classify(parent, policy) is not PageClass.subpage:
            return depth
        seen.add(id(parent))
        depth += 1
        current = parent


def build_plan(pages: Iterable[ParsedPage], policy: HierarchyPolicy = HierarchyPolicy.flat) -> list[PlannedPage]:
    """Order pages so that executing the plan front to back never needs a parent created later.

    Root pages first, then section pages, then sub-pages by depth, each depth
    grouped by parent in order of the group's first appearance.
    """
    policy = HierarchyPolicy(policy)
    pages = list(pages)
    by_slug: dict[str, ParsedPage] = {}
    for page in pages:
        by_slug.setdefault(page.slug_key, page)

    roots, sections = [], []
    levels: dict[int, dict[str, list[ParsedPage]]] = {}
    for page in pages:
        page_class = classify(page, policy)
        if page_class is PageClass.root:
            roots.append(PlannedPage(page, page_class))
        elif page_class is PageClass.section:
            sections.append(PlannedPage(page, page_class))
        else:
            depth = _subpage_depth(page, by_slug, policy)
            levels.setdefault(depth, {}).setdefault(page.parent_key, []).append(page)

    plan = roots + sections
    for depth in sorted(levels):
        for parent_key, siblings in levels[depth].items():
            plan.extend(PlannedPage(p, PageClass.subpage, parent_key, depth) for p in siblings)
    return plan


class SlugRegistry:
    """Run-local slug key -> backend id map; the first assignment of a slug wins."""

    def __init__(self):
        self._ids: dict[str, int] = {}

    def register(self, slug: str, record_id: int) -> bool:
        if slug in self._ids:
            logger.warning("Duplicate slug '%s': keeping page %d, ignoring %d", slug, self._ids[slug], record_id)
            return False
        self._ids[slug] = record_id
        return True

    def resolve(self, slug: str) -> Optional[int]:
        return self._ids.get(slug)

    def as_dict(self) -> dict[str, int]:
        return dict(self._ids)

    def __contains__(self, slug: str) -> bool:
        return slug in self._ids

    def __len__(self) -> int:
        return len(self._ids)


class HierarchyResolver:
    """Turns plan entries into placements as pages get created, one at a time.

    Call ``place`` before creating a page and ``created`` with the id the
    backend assigned. Parents that cannot be resolved fall back to
    ``fallback_id`` and are listed in ``unresolved``; such pages go after the
    last page this run created in that container.
    """

    def __init__(
        self,
        policy: HierarchyPolicy,
        root_id: int,
        fallback_id: Optional[int] = None,
        registry: Optional[SlugRegistry] = None,
        ):
        self.policy = HierarchyPolicy(policy)
        self.root_id = root_id
        self.fallback_id = root_id if fallback_id is None else fallback_id
        self.registry = registry if registry is not None else SlugRegistry()
        self.unresolved: list[str] = []
        self._anchor: Optional[int] = None
        self._last_in_group: dict[tuple[PageClass, str], int] = {}
        self._last_in_container: dict[int, int] = {}
        self._pending: Optional[tuple[Optional[tuple[PageClass, str]], int]] = None

    def _fallback(self, entry: PlannedPage, reason: str) -> None:
        logger.warning(
            "Unresolved parent for '%s' (%s); using container %d",
            entry.page.title, reason, self.fallback_id,
        )
        self.unresolved.append(entry.page.title)

    def _resolve(self, entry: PlannedPage) -> Optional[int]:
        """Container id the page belongs in, or None when its parent is unknown."""
        if entry.page_class is PageClass.root:
            return self.root_id
        if entry.page_class is PageClass.section:
            if self._anchor is None:
                self._fallback(entry, "no root page created")
            return self._anchor
        parent_id = self.registry.resolve(entry.parent)
        if parent_id is None:
            self._fallback(entry, f"no page with slug '/{entry.parent}'")
        return parent_id

    def place(self, entry: PlannedPage) -> tuple[int, Placement]:
        """Return (container_id, placement) for the next page to create."""
        container_id = self._resolve(entry)
        if container_id is None:
            container_id, group = self.fallback_id, None
            previous = self._last_in_container.get(container_id)
        else:
            group = entry.group
            previous = self._last_in_group.get(group)
        self._pending = (group, container_id)
        if previous is None:
            return container_id, FirstChildOf(container_id)
        return container_id, After(previous)

    def created(self, entry: PlannedPage, page_id: int) -> None:
        """Record the id assigned to the page placed last."""
        group, container_id = self._pending
        self._pending = None
        if group is not None:
            self._last_in_group[group] = page_id
        self._last_in_container[container_id] = page_id
        if entry.page_class is PageClass.root and self._anchor is None:
            self._anchor = page_id
        if entry.page.slug_key:
            self.registry.register(entry.page.slug_key, page_id)
