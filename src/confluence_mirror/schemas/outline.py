"""Outline (table of contents) models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class OutlineEntry(BaseModel):
    """A single heading in reading order."""

    id: str
    title: str
    level: int = Field(..., ge=1, le=6)
