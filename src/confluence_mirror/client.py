"""Confluence REST API client (API token Basic auth, REST API v1)."""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from confluence_mirror import config
from confluence_mirror.exceptions import ConfigurationError
from confluence_mirror.http_utils import fetch_json_with_retries
from confluence_mirror.schemas import ChildPage, ConfluencePage

logger = logging.getLogger(__name__)

_PAGE_EXPAND = "body.atlas_doc_format,body.storage,version,space"


class ConfluenceClient:
    """Fetch pages from one Confluence instance.

    Use as an async context manager to share a pooled connection across calls::

        async with ConfluenceClient(base_url, email, api_token) as client:
            page = await client.get_page("123456")

    Outside a context each call opens its own connection.
    """

    def __init__(self, base_url: str, email: str, api_token: str) -> None:
        if not base_url:
            raise ConfigurationError("Confluence base URL is required")
        self.base_url = base_url.rstrip("/")
        token = base64.b64encode(f"{email}:{api_token}".encode()).decode("ascii")
        self._auth_headers = {"Authorization": f"Basic {token}"}
        self._http: httpx.AsyncClient | None = None

    @classmethod
    def from_env(cls) -> ConfluenceClient:
        """Build a client from ``CONFLUENCE_BASE_URL``, ``CONFLUENCE_EMAIL`` and ``CONFLUENCE_API_TOKEN``."""
        if not (config.CONFLUENCE_BASE_URL and config.CONFLUENCE_EMAIL and config.CONFLUENCE_API_TOKEN):
            raise ConfigurationError(
                "Authentication credentials required: set CONFLUENCE_BASE_URL, "
                "CONFLUENCE_EMAIL and CONFLUENCE_API_TOKEN."
            )
        return cls(config.CONFLUENCE_BASE_URL, config.CONFLUENCE_EMAIL, config.CONFLUENCE_API_TOKEN)

    async def __aenter__(self) -> ConfluenceClient:
        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(config.CONFLUENCE_FETCH_TIMEOUT_S),
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def api_url(self, endpoint: str) -> str:
        return f"{self.base_url}/wiki/rest/api/{endpoint.lstrip('/')}"

    async def _get(self, endpoint: str, params: dict[str, str] | None = None) -> Any:
        return await fetch_json_with_retries(
            self.api_url(endpoint),
            client=self._http,
            headers=self._auth_headers,
            params=params,
        )

    async def get_page(self, page_id: str, *, include_children: bool = False) -> ConfluencePage:
        """Fetch a page with its ADF and storage bodies.

        Raises:
            PageNotFoundError: If the page does not exist.
            FetchError: On any other HTTP or network failure.
        """
        data = await self._get(f"content/{page_id}", params={"expand": _PAGE_EXPAND})
        page = parse_page(data)
        if include_children:
            page = page.model_copy(update={"children": await self.get_child_pages(page_id)})
        return page

    async def get_page_title(self, page_id: str) -> str:
        """Fetch only the title of a page; used to label links to it."""
        data = await self._get(f"content/{page_id}")
        return str(data.get("title", ""))

    async def get_child_pages(self, page_id: str) -> list[ChildPage]:
        data = await self._get(f"content/{page_id}/child/page")
        return [
            ChildPage(
                id=str(item.get("id", "")),
                title=item.get("title", ""),
                status=item.get("status"),
                webui=(item.get("_links") or {}).get("webui"),
            )
            for item in data.get("results", [])
        ]


def parse_page(data: dict[str, Any]) -> ConfluencePage:
    """Map a REST v1 content payload onto :class:`ConfluencePage`."""
    body = data.get("body") or {}
    adf = (body.get("atlas_doc_format") or {}).get("value")
    storage_html = (body.get("storage") or {}).get("value") or ""
    return ConfluencePage(
        id=str(data.get("id", "")),
        title=data.get("title", ""),
        adf=adf,
        storage_html=storage_html,
        version=(data.get("version") or {}).get("number"),
        space_key=(data.get("space") or {}).get("key"),
        webui=(data.get("_links") or {}).get("webui"),
    )
