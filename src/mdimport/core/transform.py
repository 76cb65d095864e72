"""Page and content-block transformation into backend record field maps"""

import html
import re
from typing import Any, Callable, Optional

from mdimport.core.models import ContentBlock, ParsedPage
from mdimport.core.render import render_html
from mdimport.core.utils.slug import normalize_slug
from mdimport.crud.models import DEFAULT_ZONE, PAGE_TYPE, BlockKind


HEADING_RE = re.compile(r'^#+[ \t]+(.+)$', re.MULTILINE)
BULLET_RE = re.compile(r'^[-*][ \t]+(.+)$', re.MULTILINE)
TABLE_SEPARATOR_RE = re.compile(r'^\|[\s\-:|]+\|$')
QUOTE_AUTHOR_RE = re.compile(r'>[ \t]*[—\-][ \t]*(.+)$', re.MULTILINE)
QUOTE_MARKS = '"“” '


# --- extraction helpers ---

def extract_header_text(content: str) -> str:
    """Text of the first markdown heading line, or ''."""
    m = HEADING_RE.search(content)
    return m.group(1).strip() if m else ''


def strip_first_header(content: str) -> str:
    """Remove only the first heading line."""
    return HEADING_RE.sub('', content, count=1).strip()


def extract_bullet_items(content: str) -> str:
    """Newline-joined texts of '-' / '*' list items."""
    return '\n'.join(m.strip() for m in BULLET_RE.findall(content))


def extract_table_content(content: str) -> str:
    """Pipe rows with trimmed cells, separator rows dropped."""
    rows = []
    for line in content.splitlines():
        line = line.strip()
        if not line.startswith('|') or TABLE_SEPARATOR_RE.match(line):
            continue
        cells = [c.strip() for c in line.strip('| ').split('|')]
        rows.append('|'.join(cells))
    return '\n'.join(rows)


def extract_quote_text(content: str) -> str:
    """Quoted text from '>' lines, attribution lines and quotation marks removed."""
    parts = []
    for line in content.splitlines():
        line = line.strip()
        if not line.startswith('>'):
            continue
        text = line.lstrip('> ')
        if text.startswith(('—', '-')):
            continue
        parts.append(text.strip(QUOTE_MARKS))
    return ' '.join(p for p in parts if p)


def extract_quote_author(content: str) -> str:
    """Attribution following an em-dash or hyphen inside a quote line."""
    m = QUOTE_AUTHOR_RE.search(content)
    return m.group(1).strip() if m else ''


# --- per-kind transforms ---

def _heading(block: ContentBlock, preset: str) -> dict[str, Any]:
    return {"kind": BlockKind.header, "header": extract_header_text(block.content), "body": ""}


def _bullets(block: ContentBlock, preset: str) -> dict[str, Any]:
    return {
        "kind": BlockKind.bullets,
        "header": extract_header_text(block.content),
        "body": extract_bullet_items(block.content),
    }


def _table(block: ContentBlock, preset: str) -> dict[str, Any]:
    return {
        "kind": BlockKind.table,
        "header": extract_header_text(block.content),
        "body": extract_table_content(block.content),
    }


def _quote(block: ContentBlock, preset: str) -> dict[str, Any]:
    text = extract_quote_text(block.content)
    return {
        "kind": BlockKind.text,
        "header": extract_quote_author(block.content),
        "body": f"<blockquote><p>{html.escape(text)}</p></blockquote>" if text else "",
    }


def _textmedia(block: ContentBlock, preset: str) -> dict[str, Any]:
    return {
        "kind": BlockKind.textmedia,
        "header": extract_header_text(block.content),
        "body": render_html(strip_first_header(block.content), preset),
        "media": block.image,
        "media_position": block.position,
    }


def _rich_text(block: ContentBlock, preset: str) -> dict[str, Any]:
    return {
        "kind": BlockKind.text,
        "header": extract_header_text(block.content),
        "body": render_html(strip_first_header(block.content), preset),
    }


Transform = Callable[[ContentBlock, str], dict[str, Any]]

# (type, subtype) -> transform; subtype None matches any subtype of that type.
TRANSFORMS: dict[tuple[str, Optional[str]], Transform] = {
    ("header",    None):      _heading,
    ("text",      "bullets"): _bullets,
    ("text",      "table"):   _table,
    ("quote",     None):      _quote,
    ("textmedia", None):      _textmedia,
}


def resolve_transform(block: ContentBlock) -> Transform:
    """Exact (type, subtype) match, then (type, any), then rich text."""
    return (
        TRANSFORMS.get((block.type, block.subtype))
        or TRANSFORMS.get((block.type, None))
        or _rich_text
    )


def transform_block(block: ContentBlock, container_id: int, sort_index: int, preset: str = "commonmark") -> dict[str, Any]:
    """Build the content element record for the block at zero-based sort_index on a page."""
    record = {
        "container_id": container_id,
        "zone": DEFAULT_ZONE,
        "sorting": (sort_index + 1) * 100,
    }
    record.update(resolve_transform(block)(block, preset))
    return record


def build_page_record(page: ParsedPage, container_id: int) -> dict[str, Any]:
    """Build the page record for a parsed page placed in container_id."""
    record = {
        "container_id": container_id,
        "title": page.title,
        "slug": normalize_slug(page.slug),
        "hidden": False,
        "page_type": PAGE_TYPE,
        "sorting": page.nav_position * 100,
    }
    if page.seo_title is not None:
        record["seo_title"] = page.seo_title
    if page.seo_description is not None:
        record["description"] = page.seo_description
    return record
