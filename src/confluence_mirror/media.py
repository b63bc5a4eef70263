"""Resolve ADF media nodes against the attachments listed in storage HTML.

ADF media nodes only carry opaque media-service ids. The storage-format body of
the same page lists the attachments by filename, in document order, so the two
are matched up by a strict priority of lookups (see :func:`resolve_media`).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Literal
from urllib.parse import quote

from confluence_mirror import config
from confluence_mirror.schemas import AdfNode, Document, MediaNode
from confluence_mirror.tree import map_tree

logger = logging.getLogger(__name__)

MediaKind = Literal["image", "video", "file", "unknown"]

# Storage HTML is a constrained subset, so a tolerant pattern is enough here.
_ATTACHMENT_RE = re.compile(r'<ri:attachment\s+ri:filename="([^"]*)"[^>]*/?>', re.IGNORECASE)
_POSITIONAL_KEY_RE = re.compile(r"^(?:image|video|file)-\d+$")

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".svg")
VIDEO_EXTENSIONS = (".mp4", ".webm", ".ogg", ".mov", ".avi", ".mkv", ".flv")

PLACEHOLDER_MEDIA_ID = "placeholder-image"
PLACEHOLDER_IMAGE_URL = (
    "https://images.unsplash.com/photo-1498050108023-c5249f4df085"
    "?ixlib=rb-4.0.3&auto=format&fit=crop&w=1200&q=80"
)

# encodeURIComponent leaves these unescaped.
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class Attachment:
    """A resolved attachment download location."""

    url: str
    kind: MediaKind
    file_name: str | None = None


AttachmentTable = dict[str, Attachment]


def classify_filename(filename: str) -> MediaKind:
    """Classify an attachment by its extension."""
    lowered = filename.lower()
    if lowered.endswith(IMAGE_EXTENSIONS):
        return "image"
    if lowered.endswith(VIDEO_EXTENSIONS):
        return "video"
    return "file"


def is_positional_key(key: str) -> bool:
    return bool(_POSITIONAL_KEY_RE.match(key))


def extract_attachments(
    storage_html: str,
    page_id: str,
    *,
    base_url: str | None = None,
) -> AttachmentTable:
    """Build the attachment table for a page from its storage-format HTML.

    Each attachment is stored twice: under a per-kind positional key
    (``image-0``, ``video-0``, ``file-0``, ...) and under its raw filename.
    Only the first reference to a filename counts.

    Args:
        storage_html: Storage-format body of the page. Not modified.
        page_id: Id of the page owning the attachments.
        base_url: Confluence base URL. Defaults to ``CONFLUENCE_BASE_URL``.

    Returns:
        The attachment table, in scan order. Empty if no base URL is configured.
    """
    base = (base_url if base_url is not None else config.CONFLUENCE_BASE_URL).rstrip("/")
    table: AttachmentTable = {}
    if not base:
        logger.error("CONFLUENCE_BASE_URL not configured; attachments cannot be resolved")
        return table

    counters: dict[str, int] = {"image": 0, "video": 0, "file": 0}
    seen: set[str] = set()
    for match in _ATTACHMENT_RE.finditer(storage_html or ""):
        filename = match.group(1)
        if filename in seen:
            continue
        seen.add(filename)

        kind = classify_filename(filename)
        url = f"{base}/wiki/download/attachments/{page_id}/{quote(filename, safe=_URI_COMPONENT_SAFE)}"
        attachment = Attachment(url=url, kind=kind, file_name=filename)

        table[f"{kind}-{counters[kind]}"] = attachment
        counters[kind] += 1
        table[filename] = attachment

    logger.debug("Found %d attachments for page %s", len(seen), page_id)
    return table


class _MediaLookup:
    """Ordered key candidates for one attachment table."""

    def __init__(self, table: AttachmentTable) -> None:
        self.table = table
        # Positional keys are inserted in scan order.
        self.scan_order = [key for key in table if is_positional_key(key)]
        self.filename_keys = [key for key in table if not is_positional_key(key)]
        self.sorted_positional = sorted(self.scan_order)

    def candidate_keys(self, media_id: str | None, position: int) -> list[str]:
        keys: list[str] = []
        if media_id:
            keys.append(media_id)
        if position < len(self.scan_order):
            keys.append(self.scan_order[position])
        keys.extend(f"{kind}-{position}" for kind in ("image", "video", "file"))
        keys.extend(self.filename_keys)
        keys.extend(self.sorted_positional)
        return keys

    def find(self, media_id: str | None, position: int) -> Attachment | None:
        for key in self.candidate_keys(media_id, position):
            attachment = self.table.get(key)
            if attachment is not None:
                return attachment
        return None


def resolve_media(document: Document, attachments: AttachmentTable) -> Document:
    """Annotate file media nodes with their attachment URL, kind and filename.

    Nodes are visited in reading order with one counter for the whole tree.
    For each media node of type ``file`` the lookup order is:

    1. the node's own id as a key,
    2. the positional key of the ``n``-th attachment in scan order, then
       ``image-<n>``, ``video-<n>``, ``file-<n>``, for the current counter ``n``,
    3. every filename key, in table order,
    4. every positional key, sorted.

    The counter advances once per file media node whether or not a match was
    found. Unmatched nodes are returned untouched. Running this again on its
    own output with the same table gives the same annotations.
    """
    lookup = _MediaLookup(attachments)
    position = 0

    def annotate(node: AdfNode) -> AdfNode:
        nonlocal position
        if not isinstance(node, MediaNode) or node.attrs.type != "file":
            return node

        media_id = node.attrs.id
        current = position
        position += 1

        if media_id == PLACEHOLDER_MEDIA_ID:
            return node.model_copy(
                update={
                    "attrs": node.attrs.model_copy(
                        update={"processed_url": PLACEHOLDER_IMAGE_URL, "processed_type": "image"}
                    )
                }
            )

        attachment = lookup.find(media_id, current)
        if attachment is None:
            logger.debug("No attachment for media %s at position %d", media_id, current)
            return node

        return node.model_copy(
            update={
                "attrs": node.attrs.model_copy(
                    update={
                        "processed_url": attachment.url,
                        "processed_type": attachment.kind,
                        "processed_file_name": attachment.file_name,
                    }
                )
            }
        )

    return map_tree(document, annotate)


def process_media(
    document: Document,
    storage_html: str,
    page_id: str,
    *,
    base_url: str | None = None,
) -> Document:
    """Extract the attachment table from ``storage_html`` and resolve ``document``."""
    attachments = extract_attachments(storage_html, page_id, base_url=base_url)
    return resolve_media(document, attachments)
