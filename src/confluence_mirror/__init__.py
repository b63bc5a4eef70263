"""confluence_mirror: mirror Confluence pages into a local viewer."""

from confluence_mirror.client import ConfluenceClient
from confluence_mirror.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConfluenceMirrorError,
    FetchError,
    PageNotFoundError,
    ParseError,
    RateLimitError,
)
from confluence_mirror.links import LinkEnrichmentResult, enrich_links
from confluence_mirror.media import extract_attachments, process_media, resolve_media
from confluence_mirror.outline import OutlineResult, extract_outline, generate_slug
from confluence_mirror.pipeline import PipelineOptions, mirror_page, process_document
from confluence_mirror.schemas import Document, EnrichedLink, MirrorResult, OutlineEntry
from confluence_mirror.tree import dump_document, iter_nodes, map_tree, parse_document
from confluence_mirror.urls import UrlTransformer, extract_page_id

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "ConfluenceClient",
    "ConfluenceMirrorError",
    "Document",
    "EnrichedLink",
    "FetchError",
    "LinkEnrichmentResult",
    "MirrorResult",
    "OutlineEntry",
    "OutlineResult",
    "PageNotFoundError",
    "ParseError",
    "PipelineOptions",
    "RateLimitError",
    "UrlTransformer",
    "dump_document",
    "enrich_links",
    "extract_attachments",
    "extract_outline",
    "extract_page_id",
    "generate_slug",
    "iter_nodes",
    "map_tree",
    "mirror_page",
    "parse_document",
    "process_document",
    "process_media",
    "resolve_media",
]
