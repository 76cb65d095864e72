"""Unit tests for core/emit.py"""

from mdimport.core.emit import build_marker, emit_page
from mdimport.core.models import ContentBlock, ParsedPage
from mdimport.core.parse import parse_file, parse_text


def test_build_marker_orders_subtype_first():
    block = ContentBlock(type="text", subtype="table", attributes={"class": "wide"}, content="| a |")
    assert build_marker(block) == "<!-- CE: text, subtype: table, class: wide -->"


def test_build_marker_type_only():
    assert build_marker(ContentBlock(type="quote", content="> x")) == "<!-- CE: quote -->"


def test_emit_round_trip_sample(site_dir):
    """parse -> emit -> parse yields the same metadata and blocks."""
    page = parse_file(site_dir / "about.md")
    again = parse_text(emit_page(page))
    assert again.metadata == page.metadata
    assert again.blocks == page.blocks


def test_emit_round_trip_constructed():
    """A hand-built page survives the round trip, unicode and nested metadata included."""
    page = ParsedPage(
        metadata={"title": "Über uns", "slug": "ueber-uns", "parent": "/", "seo": {"title": "Ü", "description": "d"}},
        blocks=[
            ContentBlock(type="header", content="# Grüß Gott"),
            ContentBlock(type="textmedia", attributes={"image": "placeholder://x.jpg", "position": "left"},
                         content="## Story\n\nSince 2005."),
            ContentBlock(type="text", subtype="bullets", content="- a\n- b"),
        ],
    )
    again = parse_text(emit_page(page))
    assert again.metadata == page.metadata
    assert again.blocks == page.blocks


def test_emit_page_without_blocks():
    page = ParsedPage(metadata={"title": "Empty"})
    assert parse_text(emit_page(page)).blocks == []
