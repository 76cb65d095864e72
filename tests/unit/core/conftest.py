"""Shared fixtures for core unit tests"""

import pytest

from mdimport.core.models import ParsedPage


def make_page(title: str, slug: str, parent: str = "/", nav: int = None, **extra) -> ParsedPage:
    """Build a ParsedPage with only front-matter metadata."""
    metadata = {"title": title, "slug": slug, "parent": parent, **extra}
    if nav is not None:
        metadata["nav_position"] = nav
    return ParsedPage(metadata=metadata)


@pytest.fixture(name="page_factory")
def page_factory_fixture():
    return make_page
