"""Import orchestration: plan pages, create them and their blocks, collect results"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from mdimport.config import Settings
from mdimport.core.hierarchy import HierarchyPolicy, HierarchyResolver, PlannedPage, build_plan
from mdimport.core.models import After, FirstChildOf, ParsedPage
from mdimport.core.transform import build_page_record, transform_block
from mdimport.crud.backend import Backend
from mdimport.errors import BackendWriteFailure, RecordRejected


logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    titles: list[str] = field(default_factory=list)          # creation order
    page_ids: dict[str, int] = field(default_factory=dict)   # slug key -> backend id
    block_count: int = 0
    unresolved: list[str] = field(default_factory=list)      # titles placed in the fallback container


def _create_blocks(backend: Backend, page: ParsedPage, page_id: int, preset: str) -> int:
    """Create a page's blocks in order, each after the previous one."""
    previous: Optional[int] = None
    for i, block in enumerate(page.blocks):
        record = transform_block(block, page_id, i, preset)
        placement = FirstChildOf(page_id) if previous is None else After(previous)
        try:
            previous = backend.create_block(record, placement)
        except RecordRejected as e:
            raise BackendWriteFailure(f'content block {i + 1} ({block.type}) of page "{page.title}"', e.errors) from e
    return len(page.blocks)


def _create_page(backend: Backend, resolver: HierarchyResolver, entry: PlannedPage) -> int:
    container_id, placement = resolver.place(entry)
    record = build_page_record(entry.page, container_id)
    try:
        page_id = backend.create_page(record, placement)
    except RecordRejected as e:
        label = f'page "{entry.page.title}"' + (f" ({entry.page.path})" if entry.page.path else "")
        raise BackendWriteFailure(label, e.errors) from e
    resolver.created(entry, page_id)
    return page_id


def import_pages(
    pages: Iterable[ParsedPage],
    backend: Backend,
    root_id: int,
    policy: HierarchyPolicy = HierarchyPolicy.flat,
    fallback_id: Optional[int] = None,
    preset: str = "commonmark",
    ) -> ImportResult:
    """Create every page and its blocks strictly in plan order.

    Raises BackendWriteFailure on the first rejected record; records created
    before it are left in place.
    """
    resolver = HierarchyResolver(policy, root_id, fallback_id)
    result = ImportResult()
    for entry in build_plan(pages, policy):
        page_id = _create_page(backend, resolver, entry)
        result.block_count += _create_blocks(backend, entry.page, page_id, preset)
        result.titles.append(entry.page.title)
        logger.debug("Imported '%s' as page %d (%s)", entry.page.title, page_id, entry.page_class.value)

    result.page_ids = resolver.registry.as_dict()
    result.unresolved = list(resolver.unresolved)
    logger.info("Imported %d page(s), %d content block(s)", len(result.titles), result.block_count)
    return result


def import_all(
    pages: Iterable[ParsedPage],
    backend: Backend,
    root_id: int,
    policy: HierarchyPolicy = HierarchyPolicy.flat,
    fallback_id: Optional[int] = None,
    ) -> list[str]:
    """Import pages and return their titles in creation order."""
    return import_pages(pages, backend, root_id, policy, fallback_id).titles


def run_import(pages: Iterable[ParsedPage], backend: Backend, settings: Settings) -> ImportResult:
    """Import parsed pages with the configured root, policy, fallback, and renderer."""
    return import_pages(
        pages,
        backend,
        settings.root_id,
        HierarchyPolicy(settings.hierarchy),
        settings.fallback_container,
        settings.parser_config,
    )
