"""Backend table definitions for pages and their content elements"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, SQLModel


PAGE_TYPE = "standard"
DEFAULT_ZONE = 0


class BlockKind(str, Enum):
    """Content element kinds understood by the backend"""
    header = "header"
    bullets = "bullets"
    table = "table"
    text = "text"
    textmedia = "textmedia"


class Page(SQLModel, table=True):
    """A page in the tree; container_id points at its parent page (or an external root)"""
    __tablename__ = "pages"
    id: Optional[int] = Field(default=None, primary_key=True)
    container_id: int = Field(..., index=True, nullable=False)
    title: str = Field(..., nullable=False)
    slug: str = Field(..., index=True, nullable=False)
    hidden: bool = Field(default=False, nullable=False)
    page_type: str = Field(default=PAGE_TYPE, nullable=False)
    sorting: int = Field(..., nullable=False, description="Sort weight among siblings")
    seo_title: Optional[str] = Field(default=None)
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class ContentElement(SQLModel, table=True):
    """One content block placed on a page"""
    __tablename__ = "content_elements"
    id: Optional[int] = Field(default=None, primary_key=True)
    container_id: int = Field(..., foreign_key="pages.id", index=True, nullable=False)
    zone: int = Field(default=DEFAULT_ZONE, nullable=False, description="Placement zone on the page")
    sorting: int = Field(..., nullable=False, description="Sort weight within the page")
    kind: BlockKind = Field(..., nullable=False)
    header: str = Field(default="", nullable=False)
    body: str = Field(default="", sa_column=Column(Text, nullable=False))
    media: Optional[str] = Field(default=None, description="Media reference for textmedia blocks")
    media_position: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
