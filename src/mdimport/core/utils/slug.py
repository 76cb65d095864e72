"""Slug generation and path-reference normalisation"""

import re


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s/-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def slug_key(ref: str) -> str:
    """Registry key for a slug or a parent reference: '/about/team/' -> 'about/team'."""
    return (ref or '').strip().strip('/')


def normalize_slug(slug: str) -> str:
    """Page path as stored by the backend: exactly one leading slash."""
    return '/' + slug_key(slug)
