"""File discovery, front-matter extraction, and content-block marker splitting"""

import logging
import re
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml

from mdimport.core.models import ContentBlock, ParsedPage
from mdimport.errors import MalformedDocument, UnreadableDocument


logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r'\A---[ \t]*\n(.*?)\n---[ \t]*(?:\n(.*))?\Z', re.DOTALL)
MARKER_RE = re.compile(r'<!--\s*CE:\s*([^>]+?)\s*-->')
LEADING_BLANK_RE = re.compile(r'\A(?:[ \t]*\n)+')
MD_EXTENSIONS = ('.md',)


def _split_frontmatter(text: str, path: Optional[str] = None) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body); the YAML header is mandatory."""
    m = FRONTMATTER_RE.match(text)
    if not m:
        raise MalformedDocument(path, "no YAML frontmatter found")
    try:
        fm = yaml.safe_load(m.group(1))
    except yaml.YAMLError as e:
        raise MalformedDocument(path, f"invalid YAML frontmatter: {e}") from e
    if not isinstance(fm, dict):
        raise MalformedDocument(path, f"invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
    return fm, m.group(2) or ''


def _trim_blank_lines(text: str) -> str:
    """Drop leading blank lines and trailing whitespace; keeps first-line indentation."""
    return LEADING_BLANK_RE.sub('', text).rstrip()


def parse_marker(label: str) -> ContentBlock:
    """Parse 'textmedia, image: x.jpg, position: right' into an empty ContentBlock."""
    tokens = [t.strip() for t in label.split(',')]
    subtype = None
    attributes: dict[str, str] = {}
    for token in tokens[1:]:
        if ':' not in token:
            continue
        key, value = (s.strip() for s in token.split(':', 1))
        if key == 'subtype':
            subtype = value or None
        else:
            attributes[key] = value
    return ContentBlock(type=tokens[0], subtype=subtype, attributes=attributes)


def parse_blocks(body: str) -> list[ContentBlock]:
    """Split a body on CE markers; text before the first marker is discarded."""
    parts = MARKER_RE.split(body.strip())
    blocks: list[ContentBlock] = []
    # parts = [preamble, label, segment, label, segment, ...]
    for label, segment in zip(parts[1::2], parts[2::2]):
        content = _trim_blank_lines(segment)
        if not content:
            continue
        marker = parse_marker(label)
        blocks.append(marker.model_copy(update={'content': content}))
    return blocks


def parse_text(raw: str, path: Optional[str] = None) -> ParsedPage:
    """Parse raw document text into a ParsedPage."""
    text = raw.lstrip('\ufeff').replace('\r\n', '\n')
    metadata, body = _split_frontmatter(text, path)
    return ParsedPage(metadata=metadata, blocks=parse_blocks(body), path=path)


def parse_file(path: Path) -> ParsedPage:
    """Read and parse a single Markdown file."""
    try:
        raw = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise UnreadableDocument(str(path), f"cannot read file: {e}") from e
    page = parse_text(raw, str(path))
    logger.debug("Parsed %s: %d block(s)", path, len(page.blocks))
    return page


def discover_files(path: Path, extensions: Iterable[str] = MD_EXTENSIONS) -> list[Path]:
    """Return files directly inside path whose suffix matches exactly (case-sensitive), sorted by name."""
    if not path.is_dir():
        raise NotADirectoryError(f"Directory not found: {path}")
    suffixes = set(extensions)
    return sorted(
        (p for p in path.iterdir() if p.is_file() and p.suffix in suffixes),
        key=lambda p: p.name,
    )


def parse_dir(path: Path, extensions: Iterable[str] = MD_EXTENSIONS) -> list[ParsedPage]:
    """Parse every Markdown file in path, then stable-sort by nav_position."""
    pages = [parse_file(p) for p in discover_files(path, extensions)]
    pages.sort(key=lambda page: page.nav_position)
    logger.info("Loaded %d page(s) from %s", len(pages), path)
    return pages
