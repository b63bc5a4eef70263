"""Link enrichment models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EnrichedLink(BaseModel):
    """Fetched metadata for one Confluence page URL found in a document."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page_id: str = Field(..., alias="pageId")
    title: str
    original_url: str = Field(..., alias="originalUrl")
