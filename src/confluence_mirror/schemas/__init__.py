"""Shared schemas for confluence_mirror."""

from confluence_mirror.schemas.adf import (
    AdfNode,
    AnyMark,
    AnyNode,
    Document,
    GenericMark,
    GenericNode,
    HeadingAttrs,
    HeadingNode,
    InlineCardAttrs,
    InlineCardNode,
    LinkAttrs,
    LinkMark,
    MediaAttrs,
    MediaNode,
    TextNode,
)
from confluence_mirror.schemas.links import EnrichedLink
from confluence_mirror.schemas.mirror import MirrorResult
from confluence_mirror.schemas.outline import OutlineEntry
from confluence_mirror.schemas.page import ChildPage, ConfluencePage

__all__ = [
    "AdfNode",
    "AnyMark",
    "AnyNode",
    "ChildPage",
    "ConfluencePage",
    "Document",
    "EnrichedLink",
    "GenericMark",
    "GenericNode",
    "HeadingAttrs",
    "HeadingNode",
    "InlineCardAttrs",
    "InlineCardNode",
    "LinkAttrs",
    "LinkMark",
    "MediaAttrs",
    "MediaNode",
    "MirrorResult",
    "OutlineEntry",
    "TextNode",
]
