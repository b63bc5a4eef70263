"""Confluence REST payload models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ChildPage(BaseModel):
    """A direct child of a page, as listed by the child page endpoint."""

    id: str
    title: str
    status: str | None = None
    webui: str | None = None


class ConfluencePage(BaseModel):
    """The subset of a Confluence page the mirror needs.

    Attributes:
        id: Confluence page id.
        title: Page title.
        adf: Raw ADF body as a JSON string, if the page has one.
        storage_html: Storage-format body, used to resolve attachments.
        version: Page version number.
        space_key: Key of the owning space.
        webui: Relative web UI path of the page.
        children: Child pages, when requested.
    """

    id: str
    title: str
    adf: str | None = None
    storage_html: str = ""
    version: int | None = None
    space_key: str | None = None
    webui: str | None = None
    children: list[ChildPage] = Field(default_factory=list)
