"""Map URLs between the Confluence URL space and the local viewer."""

from __future__ import annotations

import logging
import re
from typing import Iterable
from urllib.parse import parse_qs, urlsplit

logger = logging.getLogger(__name__)

# Tried in order; the first match wins.
_PAGE_ID_PATTERNS = (
    re.compile(r"/pages/(\d+)(?:/|$)"),
    re.compile(r"[?&]pageId=(\d+)"),
    re.compile(r"[?&]homepageId=(\d+)"),
)

_EXTERNAL_PAGE_PATH = "wiki/pages"


def extract_page_id(url: str) -> str | None:
    """Extract a Confluence page id from a page URL.

    Accepted shapes, in priority order:

    1. ``.../pages/123456`` or ``.../pages/123456/Page+Title``
    2. ``...?pageId=123456``
    3. ``...?homepageId=123456`` (space overview pages)
    """
    for pattern in _PAGE_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def normalize_base_url(base_url: str) -> str:
    return base_url.rstrip("/")


def is_page_url(url: str, base_url: str) -> bool:
    """Return True if ``url`` is a page on the Confluence instance at ``base_url``."""
    try:
        base = normalize_base_url(base_url)
        if not base or not url.startswith(base):
            return False
        return extract_page_id(url) is not None
    except (TypeError, AttributeError):
        return False


class UrlTransformer:
    """Convert Confluence page URLs to local viewer URLs and back.

    Example::

        transformer = UrlTransformer(
            confluence_base_url="https://acme.atlassian.net",
            local_base_url="http://localhost:3000",
        )
        transformer.to_local("https://acme.atlassian.net/wiki/pages/123456/Title")
        # 'http://localhost:3000/?pageId=123456'
    """

    def __init__(self, confluence_base_url: str, local_base_url: str) -> None:
        self.confluence_base_url = normalize_base_url(confluence_base_url)
        self.local_base_url = normalize_base_url(local_base_url)

    def should_transform(self, url: str) -> bool:
        """Return True if ``url`` points at a page on the configured instance."""
        return is_page_url(url, self.confluence_base_url)

    def to_local(self, url: str) -> str:
        """Return the local viewer URL for ``url``, or ``url`` itself if out of scope."""
        if not self.should_transform(url):
            return url
        page_id = extract_page_id(url)
        if not page_id:
            return url
        return f"{self.local_base_url}/?pageId={page_id}"

    def to_local_many(self, urls: Iterable[str]) -> list[str]:
        return [self.to_local(url) for url in urls]

    def to_external(self, local_url: str) -> str:
        """Return a Confluence URL for a local viewer URL.

        The result always has the ``/wiki/pages/<id>`` shape. Space keys and
        title slugs from the original Confluence URL are not carried in local
        URLs, so this is not an exact inverse of :meth:`to_local`; only the
        page id survives the round trip.
        """
        try:
            parts = urlsplit(local_url)
        except (TypeError, ValueError):
            logger.debug("Unparseable local URL: %r", local_url)
            return local_url
        if not parts.scheme or not parts.netloc:
            return local_url

        page_ids = parse_qs(parts.query).get("pageId")
        if not page_ids or not page_ids[0]:
            return local_url
        return f"{self.confluence_base_url}/{_EXTERNAL_PAGE_PATH}/{page_ids[0]}"
