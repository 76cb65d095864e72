"""Intermediate data models for the parse, plan, and import pipeline"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from mdimport.core.utils.slug import slug_key, slugify


DEFAULT_NAV_POSITION = 999


class ContentBlock(BaseModel):
    """One marker-delimited segment of a document body."""
    model_config = ConfigDict(frozen=True)

    type: str
    subtype: Optional[str] = None
    attributes: dict[str, str] = Field(default_factory=dict)   # extra marker key/value pairs
    content: str = ""

    @property
    def image(self) -> Optional[str]:
        return self.attributes.get("image")

    @property
    def position(self) -> Optional[str]:
        return self.attributes.get("position")


class ParsedPage(BaseModel):
    """A source document: front-matter metadata plus its ordered content blocks."""
    metadata: dict[str, Any]
    blocks: list[ContentBlock] = Field(default_factory=list)
    path: Optional[str] = None      # source file; None when parsed from text

    @property
    def title(self) -> str:
        value = self.metadata.get("title")
        return "" if value is None else str(value)

    @property
    def slug(self) -> str:
        """Front-matter slug, else the slugified file stem, else the slugified title."""
        value = self.metadata.get("slug")
        if value:
            return str(value)
        if self.path:
            return slugify(Path(self.path).stem)
        return slugify(self.title)

    @property
    def parent(self) -> str:
        value = self.metadata.get("parent")
        return "" if value is None else str(value).strip()

    @property
    def nav_position(self) -> int:
        value = self.metadata.get("nav_position")
        if value is None or isinstance(value, bool):
            return DEFAULT_NAV_POSITION
        try:
            return int(value)
        except (TypeError, ValueError):
            return DEFAULT_NAV_POSITION

    @property
    def seo_title(self) -> Optional[str]:
        return self._seo("title")

    @property
    def seo_description(self) -> Optional[str]:
        return self._seo("description")

    @property
    def slug_key(self) -> str:
        return slug_key(self.slug)

    @property
    def parent_key(self) -> str:
        return slug_key(self.parent)

    def _seo(self, key: str) -> Optional[str]:
        seo = self.metadata.get("seo")
        if isinstance(seo, dict) and seo.get(key) is not None:
            return str(seo[key])
        return None


@dataclass(frozen=True)
class FirstChildOf:
    """Place the record as the first child of a container."""
    container_id: int


@dataclass(frozen=True)
class After:
    """Place the record directly after an existing sibling."""
    sibling_id: int


Placement = Union[FirstChildOf, After]
