"""Mirror output model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from confluence_mirror.schemas.adf import Document
from confluence_mirror.schemas.links import EnrichedLink
from confluence_mirror.schemas.outline import OutlineEntry
from confluence_mirror.schemas.page import ChildPage


class MirrorResult(BaseModel):
    """Enriched page handed to the renderer."""

    model_config = ConfigDict(populate_by_name=True)

    page_id: str = Field(..., alias="pageId")
    title: str
    document: Document
    outline: list[OutlineEntry] = Field(default_factory=list)
    links: dict[str, EnrichedLink] = Field(default_factory=dict)
    children: list[ChildPage] = Field(default_factory=list)
    view_url: str | None = Field(default=None, alias="viewUrl")
