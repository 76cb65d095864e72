"""CommonMark rendering of rich-text block bodies via markdown-it"""

from functools import lru_cache

from markdown_it import MarkdownIt


@lru_cache(maxsize=None)
def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name; raw HTML passes through."""
    return MarkdownIt(preset, options_update={"html": True, "linkify": False})


def is_known_preset(preset: str) -> bool:
    """True if markdown-it can build a parser from preset."""
    try:
        _make_parser(preset)
    except KeyError:
        return False
    return True


def render_html(markdown: str, preset: str = "commonmark") -> str:
    """Render markdown to trimmed HTML; blank input renders to '' without invoking the parser."""
    if not markdown.strip():
        return ""
    return _make_parser(preset).render(markdown).strip()
