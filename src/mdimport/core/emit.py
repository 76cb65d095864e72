"""Re-serialise parsed pages back into front-matter + CE marker markdown"""

import yaml

from mdimport.core.models import ContentBlock, ParsedPage


def build_marker(block: ContentBlock) -> str:
    """Return the '<!-- CE: ... -->' line for a block (subtype first, then attributes)."""
    parts = [block.type]
    if block.subtype:
        parts.append(f"subtype: {block.subtype}")
    parts.extend(f"{k}: {v}" for k, v in block.attributes.items())
    return f"<!-- CE: {', '.join(parts)} -->"


def emit_page(page: ParsedPage) -> str:
    """Return document text that parses back to the same metadata and blocks."""
    header = yaml.safe_dump(page.metadata, default_flow_style=False, allow_unicode=True, sort_keys=False)
    body = "\n\n".join(f"{build_marker(b)}\n\n{b.content}" for b in page.blocks)
    return f"---\n{header}---\n\n{body}\n"
