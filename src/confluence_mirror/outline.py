"""Heading outline extraction and anchor id injection."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from confluence_mirror.schemas import AdfNode, Document, HeadingNode, OutlineEntry
from confluence_mirror.tree import iter_nodes, map_tree, node_text

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")

MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6


@dataclass
class OutlineResult:
    """A document with anchored headings and its outline in reading order."""

    document: Document
    entries: list[OutlineEntry] = field(default_factory=list)


def generate_slug(text: str) -> str:
    """Turn heading text into an anchor id (``"Getting Started!!"`` -> ``"getting-started"``)."""
    slug = _SLUG_STRIP_RE.sub("", text.lower())
    slug = _WHITESPACE_RE.sub("-", slug.strip())
    return slug.strip("-")


def clamp_level(level: int | None) -> int:
    if not level:
        return MIN_HEADING_LEVEL
    return min(max(level, MIN_HEADING_LEVEL), MAX_HEADING_LEVEL)


def extract_outline(document: Document, *, unique_ids: bool = True) -> OutlineResult:
    """Collect headings in reading order and anchor each heading with an id.

    A heading that already carries ``generatedId`` keeps it verbatim, so
    running this on its own output changes nothing. Otherwise the id is a slug
    of the heading text and is written back into the heading attributes.

    Args:
        document: The document to walk. Not modified.
        unique_ids: Suffix derived ids that collide with another id in the
            same run (``intro``, ``intro-2``, ...), including precomputed
            ids on later headings. Pass False to keep plain slugs even when
            two headings share the same text.

    Returns:
        OutlineResult with the anchored document and one entry per heading.
    """
    entries: list[OutlineEntry] = []
    used: dict[str, int] = {}
    if unique_ids:
        for node in iter_nodes(document):
            if isinstance(node, HeadingNode) and node.attrs.generated_id is not None:
                used.setdefault(node.attrs.generated_id, 1)

    def anchor(node: AdfNode) -> AdfNode:
        if not isinstance(node, HeadingNode):
            return node

        title = node_text(node)
        heading_id = node.attrs.generated_id
        updated = node
        if heading_id is None:
            heading_id = generate_slug(title)
            if unique_ids and heading_id:
                heading_id = _dedupe(heading_id, used)
            updated = node.model_copy(
                update={"attrs": node.attrs.model_copy(update={"generated_id": heading_id})}
            )
        used.setdefault(heading_id, 1)

        entries.append(OutlineEntry(id=heading_id, title=title, level=clamp_level(node.attrs.level)))
        return updated

    anchored = map_tree(document, anchor)
    return OutlineResult(document=anchored, entries=entries)


def _dedupe(slug: str, used: dict[str, int]) -> str:
    if slug not in used:
        return slug
    count = used[slug]
    candidate = f"{slug}-{count + 1}"
    while candidate in used:
        count += 1
        candidate = f"{slug}-{count + 1}"
    used[slug] = count + 1
    return candidate


def render_outline(entries: Iterable[OutlineEntry]) -> str:
    """Render the outline as an indented bullet list."""
    return "\n".join("  " * (entry.level - 1) + "- " + entry.title for entry in entries)
