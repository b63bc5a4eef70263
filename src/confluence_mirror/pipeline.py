"""Enrichment pipeline: Confluence page -> renderer-ready document."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from confluence_mirror import config
from confluence_mirror.client import ConfluenceClient
from confluence_mirror.exceptions import ParseError
from confluence_mirror.links import FetchTitle, enrich_links
from confluence_mirror.media import process_media
from confluence_mirror.outline import extract_outline
from confluence_mirror.schemas import Document, EnrichedLink, MirrorResult, OutlineEntry
from confluence_mirror.tree import parse_document
from confluence_mirror.urls import UrlTransformer

logger = logging.getLogger(__name__)


@dataclass
class PipelineOptions:
    """Options for page enrichment.

    Attributes:
        resolve_media: Resolve media nodes against the page attachments.
        build_outline: Anchor headings and build the outline.
        enrich_links: Fetch titles for links to other Confluence pages.
        include_children: Also fetch the page's child pages.
        unique_heading_ids: Suffix colliding heading ids within one page.
        base_url: Confluence base URL. Defaults to ``CONFLUENCE_BASE_URL``.
        local_base_url: Local viewer base URL. Defaults to ``CONFLUENCE_LOCAL_BASE_URL``.
        link_timeout: Per-fetch timeout for link titles, in seconds.
    """

    resolve_media: bool = True
    build_outline: bool = True
    enrich_links: bool = True
    include_children: bool = False
    unique_heading_ids: bool = True
    base_url: str | None = None
    local_base_url: str | None = None
    link_timeout: float | None = None

    @property
    def confluence_base_url(self) -> str:
        return (self.base_url if self.base_url is not None else config.CONFLUENCE_BASE_URL).rstrip("/")


async def process_document(
    document: Document,
    *,
    page_id: str,
    storage_html: str = "",
    fetch_title: FetchTitle | None = None,
    options: PipelineOptions | None = None,
) -> tuple[Document, list[OutlineEntry], dict[str, EnrichedLink]]:
    """Run media resolution, outline extraction and link enrichment in order.

    Link enrichment is skipped when no ``fetch_title`` is given.

    Returns:
        Tuple of (enriched document, outline entries, link records by URL).
    """
    opts = options or PipelineOptions()
    base_url = opts.confluence_base_url

    enriched = document
    if opts.resolve_media:
        enriched = process_media(enriched, storage_html, page_id, base_url=base_url)

    outline: list[OutlineEntry] = []
    if opts.build_outline:
        result = extract_outline(enriched, unique_ids=opts.unique_heading_ids)
        enriched, outline = result.document, result.entries

    links: dict[str, EnrichedLink] = {}
    if opts.enrich_links and fetch_title is not None:
        link_result = await enrich_links(
            enriched, fetch_title, base_url=base_url, timeout=opts.link_timeout
        )
        enriched, links = link_result.document, link_result.links

    return enriched, outline, links


async def mirror_page(
    page_id: str,
    *,
    client: ConfluenceClient,
    options: PipelineOptions | None = None,
) -> MirrorResult:
    """Fetch a page and return it enriched for the renderer.

    Raises:
        PageNotFoundError: If the page does not exist.
        FetchError: If the page cannot be fetched.
        ParseError: If the page has no ADF body or it cannot be parsed.
    """
    opts = options or PipelineOptions(base_url=client.base_url)
    page = await client.get_page(page_id, include_children=opts.include_children)
    if not page.adf:
        raise ParseError(f"Page {page_id} has no ADF body")

    document = parse_document(page.adf)
    enriched, outline, links = await process_document(
        document,
        page_id=page.id or page_id,
        storage_html=page.storage_html,
        fetch_title=client.get_page_title,
        options=opts,
    )
    logger.info(
        "Mirrored page %s: %d headings, %d enriched links", page_id, len(outline), len(links)
    )

    local_base = opts.local_base_url or config.CONFLUENCE_LOCAL_BASE_URL
    transformer = UrlTransformer(opts.confluence_base_url, local_base)
    if page.webui:
        view_url = f"{transformer.confluence_base_url}/wiki/{page.webui.lstrip('/')}"
    else:
        view_url = transformer.to_external(f"{transformer.local_base_url}/?pageId={page_id}")

    return MirrorResult(
        page_id=page_id,
        title=page.title,
        document=enriched,
        outline=outline,
        links=links,
        children=page.children,
        view_url=view_url,
    )
