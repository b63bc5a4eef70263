"""Tests for the enrichment pipeline."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from confluence_mirror.exceptions import ParseError
from confluence_mirror.pipeline import PipelineOptions, mirror_page, process_document
from confluence_mirror.schemas import ConfluencePage
from confluence_mirror.tree import dump_document, parse_document

ADF = {
    "type": "doc",
    "version": 1,
    "content": [
        {"type": "heading", "attrs": {"level": 1}, "content": [{"type": "text", "text": "Overview"}]},
        {
            "type": "mediaSingle",
            "content": [{"type": "media", "attrs": {"id": "uuid-1", "type": "file", "collection": ""}}],
        },
        {
            "type": "paragraph",
            "content": [
                {
                    "type": "text",
                    "text": "see also",
                    "marks": [
                        {"type": "link", "attrs": {"href": "https://acme.atlassian.net/wiki/pages/7"}}
                    ],
                }
            ],
        },
        {"type": "heading", "attrs": {"level": 2}, "content": [{"type": "text", "text": "Details"}]},
    ],
}


def _fake_client(page: ConfluencePage) -> MagicMock:
    client = MagicMock()
    client.base_url = "https://acme.atlassian.net"
    client.get_page = AsyncMock(return_value=page)
    client.get_page_title = AsyncMock(return_value="Linked Page")
    return client


class TestProcessDocument:
    """Tests for process_document."""

    @pytest.mark.asyncio
    async def test_runs_all_stages(self, storage_html: str, base_url: str) -> None:
        doc = parse_document(ADF)
        fetch_title = AsyncMock(return_value="Linked Page")

        enriched, outline, links = await process_document(
            doc,
            page_id="42",
            storage_html=storage_html,
            fetch_title=fetch_title,
            options=PipelineOptions(base_url=base_url),
        )

        assert [entry.id for entry in outline] == ["overview", "details"]
        dumped = dump_document(enriched)
        media = dumped["content"][1]["content"][0]
        assert media["attrs"]["processedFileName"] == "diagram.png"
        assert dumped["content"][0]["attrs"]["generatedId"] == "overview"
        mark = dumped["content"][2]["content"][0]["marks"][0]
        assert mark["attrs"]["title"] == "Linked Page"
        assert list(links) == [f"{base_url}/wiki/pages/7"]
        fetch_title.assert_awaited_once_with("7")
        assert dump_document(doc) == ADF

    @pytest.mark.asyncio
    async def test_stages_can_be_disabled(self, storage_html: str, base_url: str) -> None:
        doc = parse_document(ADF)
        fetch_title = AsyncMock()

        enriched, outline, links = await process_document(
            doc,
            page_id="42",
            storage_html=storage_html,
            fetch_title=fetch_title,
            options=PipelineOptions(
                base_url=base_url, resolve_media=False, build_outline=False, enrich_links=False
            ),
        )

        assert enriched is doc
        assert outline == []
        assert links == {}
        fetch_title.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_links_skipped_without_fetcher(self, base_url: str) -> None:
        _, _, links = await process_document(
            parse_document(ADF), page_id="42", options=PipelineOptions(base_url=base_url)
        )
        assert links == {}


class TestMirrorPage:
    """Tests for mirror_page."""

    @pytest.mark.asyncio
    async def test_mirrors_page(self, storage_html: str) -> None:
        page = ConfluencePage(
            id="42",
            title="Release Notes",
            adf=json.dumps(ADF),
            storage_html=storage_html,
            webui="/spaces/ENG/pages/42/Release+Notes",
        )
        client = _fake_client(page)

        result = await mirror_page("42", client=client)

        assert result.title == "Release Notes"
        assert [entry.title for entry in result.outline] == ["Overview", "Details"]
        assert result.view_url == "https://acme.atlassian.net/wiki/spaces/ENG/pages/42/Release+Notes"
        client.get_page_title.assert_awaited_once_with("7")

        payload = result.model_dump(mode="json", by_alias=True, exclude_none=True)
        assert payload["pageId"] == "42"
        link = payload["links"]["https://acme.atlassian.net/wiki/pages/7"]
        assert link == {
            "pageId": "7",
            "title": "Linked Page",
            "originalUrl": "https://acme.atlassian.net/wiki/pages/7",
        }

    @pytest.mark.asyncio
    async def test_view_url_falls_back_to_page_path(self) -> None:
        page = ConfluencePage(id="42", title="T", adf=json.dumps({"type": "doc", "content": []}))

        result = await mirror_page("42", client=_fake_client(page))

        assert result.view_url == "https://acme.atlassian.net/wiki/pages/42"

    @pytest.mark.asyncio
    async def test_page_without_adf_raises(self) -> None:
        page = ConfluencePage(id="42", title="Legacy")
        with pytest.raises(ParseError):
            await mirror_page("42", client=_fake_client(page))
