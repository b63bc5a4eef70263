"""Pydantic models for the mirror API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ResolveResponse(BaseModel):
    """Response model for the /api/resolve endpoint.

    Attributes
    ----------
    url : str
        The URL as supplied.
    local_url : str
        Local viewer URL, or ``url`` unchanged if it is not a Confluence page.
    page_id : str | None
        Page id extracted from ``url``.
    in_scope : bool
        Whether ``url`` points at a page on the configured instance.

    """

    url: str = Field(..., description="URL as supplied")
    local_url: str = Field(..., description="Local viewer URL")
    page_id: str | None = Field(default=None, description="Extracted page id")
    in_scope: bool = Field(..., description="URL points at a page on the configured instance")


class ErrorResponse(BaseModel):
    """Error response model.

    Attributes
    ----------
    error : str
        Error message describing what went wrong.

    """

    error: str = Field(..., description="Error message")
