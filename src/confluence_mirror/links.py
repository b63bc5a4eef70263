"""Enrich links to other Confluence pages with the target page title."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable

from confluence_mirror import config
from confluence_mirror.schemas import (
    AdfNode,
    AnyMark,
    Document,
    EnrichedLink,
    InlineCardNode,
    LinkMark,
)
from confluence_mirror.tree import iter_nodes, map_tree
from confluence_mirror.urls import extract_page_id, is_page_url

logger = logging.getLogger(__name__)

FetchTitle = Callable[[str], Awaitable[str]]


@dataclass
class LinkEnrichmentResult:
    """Enriched document plus the link records keyed by original URL."""

    document: Document
    links: dict[str, EnrichedLink] = field(default_factory=dict)


def _node_urls(node: AdfNode) -> Iterable[str]:
    if isinstance(node, InlineCardNode) and node.attrs.url:
        yield node.attrs.url
    for mark in node.marks or ():
        if isinstance(mark, LinkMark) and mark.attrs.href:
            yield mark.attrs.href


def collect_page_urls(document: AdfNode, base_url: str) -> list[str]:
    """Return every distinct Confluence page URL in the tree, in reading order.

    Looks at ``inlineCard`` URLs and ``link`` mark hrefs.
    """
    found: dict[str, None] = {}
    for node in iter_nodes(document):
        for url in _node_urls(node):
            if url not in found and is_page_url(url, base_url):
                found[url] = None
    return list(found)


def group_urls_by_page(urls: Iterable[str]) -> dict[str, list[str]]:
    """Group URLs by the page id they point at."""
    groups: dict[str, list[str]] = {}
    for url in urls:
        page_id = extract_page_id(url)
        if page_id:
            groups.setdefault(page_id, []).append(url)
    return groups


async def fetch_link_records(
    urls: Iterable[str],
    fetch_title: FetchTitle,
    *,
    timeout: float | None = None,
    max_concurrency: int | None = None,
) -> dict[str, EnrichedLink]:
    """Fetch one title per distinct page id and fan it out to every URL of that page.

    Fetches run concurrently. A fetch that fails or exceeds ``timeout`` is
    logged and its URLs get no record; other pages are unaffected.
    """
    groups = group_urls_by_page(urls)
    if not groups:
        return {}

    fetch_timeout = timeout if timeout is not None else config.CONFLUENCE_LINK_FETCH_TIMEOUT_S
    semaphore = asyncio.Semaphore(max_concurrency or config.CONFLUENCE_LINK_MAX_CONCURRENCY)

    async def fetch_one(page_id: str) -> str | None:
        async with semaphore:
            try:
                return await asyncio.wait_for(fetch_title(page_id), fetch_timeout)
            except asyncio.TimeoutError:
                logger.warning("Timed out fetching page %s after %.1fs", page_id, fetch_timeout)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Failed to fetch page %s: %s", page_id, exc)
        return None

    page_ids = list(groups)
    titles = await asyncio.gather(*(fetch_one(page_id) for page_id in page_ids))

    records: dict[str, EnrichedLink] = {}
    for page_id, title in zip(page_ids, titles):
        if title is None:
            continue
        for url in groups[page_id]:
            records[url] = EnrichedLink(page_id=page_id, title=title, original_url=url)
    return records


def _annotate_mark(mark: AnyMark, links: dict[str, EnrichedLink]) -> AnyMark:
    if not isinstance(mark, LinkMark) or not mark.attrs.href:
        return mark
    record = links.get(mark.attrs.href)
    if record is None:
        return mark
    return mark.model_copy(
        update={"attrs": mark.attrs.model_copy(update={"title": record.title, "page_id": record.page_id})}
    )


def apply_link_records(document: Document, links: dict[str, EnrichedLink]) -> Document:
    """Add ``title`` and ``pageId`` to every inline card and link mark with a record."""
    if not links:
        return document

    def annotate(node: AdfNode) -> AdfNode:
        updates: dict[str, object] = {}
        if isinstance(node, InlineCardNode) and node.attrs.url:
            record = links.get(node.attrs.url)
            if record is not None:
                updates["attrs"] = node.attrs.model_copy(
                    update={"title": record.title, "page_id": record.page_id}
                )
        if node.marks:
            marks = [_annotate_mark(mark, links) for mark in node.marks]
            if any(new is not old for new, old in zip(marks, node.marks)):
                updates["marks"] = marks
        return node.model_copy(update=updates) if updates else node

    return map_tree(document, annotate)


async def enrich_links(
    document: Document,
    fetch_title: FetchTitle,
    *,
    base_url: str | None = None,
    timeout: float | None = None,
    max_concurrency: int | None = None,
) -> LinkEnrichmentResult:
    """Find Confluence page links, fetch their titles and annotate the tree.

    Args:
        document: The document to enrich. Not modified.
        fetch_title: ``async (page_id) -> title``; called once per distinct page.
        base_url: Confluence base URL. Defaults to ``CONFLUENCE_BASE_URL``.
        timeout: Per-fetch timeout in seconds.
        max_concurrency: Upper bound on simultaneous fetches.

    Returns:
        LinkEnrichmentResult with the annotated document and records by URL.
    """
    base = base_url if base_url is not None else config.CONFLUENCE_BASE_URL
    urls = collect_page_urls(document, base)
    if not urls:
        return LinkEnrichmentResult(document=document)

    links = await fetch_link_records(
        urls, fetch_title, timeout=timeout, max_concurrency=max_concurrency
    )
    logger.debug("Enriched %d of %d page links", len(links), len(urls))
    return LinkEnrichmentResult(document=apply_link_records(document, links), links=links)
