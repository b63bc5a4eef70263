"""Page endpoints for the API."""

from __future__ import annotations

import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from confluence_mirror import config
from confluence_mirror.client import ConfluenceClient
from confluence_mirror.exceptions import (
    AuthenticationError,
    ConfigurationError,
    FetchError,
    PageNotFoundError,
    ParseError,
)
from confluence_mirror.outline import render_outline
from confluence_mirror.pipeline import PipelineOptions, mirror_page
from confluence_mirror.urls import UrlTransformer, extract_page_id
from server.models import ErrorResponse, ResolveResponse

logger = logging.getLogger(__name__)

router = APIRouter()

COMMON_PAGE_RESPONSES: dict[int | str, dict] = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Page not found"},
    422: {"model": ErrorResponse, "description": "Page body cannot be parsed"},
    status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse, "description": "Confluence request failed"},
    status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse, "description": "Confluence not configured"},
}


async def get_client() -> AsyncIterator[ConfluenceClient]:
    """Yield a request-scoped Confluence client."""
    try:
        client = ConfluenceClient.from_env()
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    async with client:
        yield client


def get_transformer() -> UrlTransformer:
    return UrlTransformer(config.CONFLUENCE_BASE_URL, config.CONFLUENCE_LOCAL_BASE_URL)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.get("/api/pages/{page_id}", responses=COMMON_PAGE_RESPONSES)
async def get_page(
    page_id: str,
    include_children: bool = Query(default=False),
    client: ConfluenceClient = Depends(get_client),
) -> JSONResponse:
    """Fetch a Confluence page and return it enriched for rendering.

    **Path Parameters**
    - **page_id** (`str`): Confluence page id

    **Query Parameters**
    - **include_children** (`bool`, optional): also list child pages

    **Returns**
    - **JSONResponse**: enriched document, outline and link records, or an error
    """
    options = PipelineOptions(base_url=client.base_url, include_children=include_children)
    try:
        result = await mirror_page(page_id, client=client, options=options)
    except PageNotFoundError as exc:
        return _error(status.HTTP_404_NOT_FOUND, str(exc))
    except ParseError as exc:
        return _error(422, str(exc))
    except AuthenticationError as exc:
        logger.error("Confluence rejected credentials for page %s: %s", page_id, exc)
        return _error(status.HTTP_502_BAD_GATEWAY, "Confluence rejected the configured credentials")
    except FetchError as exc:
        logger.warning("Fetching page %s failed: %s", page_id, exc)
        return _error(status.HTTP_502_BAD_GATEWAY, str(exc))

    return JSONResponse(content=result.model_dump(mode="json", by_alias=True, exclude_none=True))


@router.get("/api/resolve", response_model=ResolveResponse)
async def resolve_url(
    url: str = Query(..., min_length=1),
    transformer: UrlTransformer = Depends(get_transformer),
) -> ResolveResponse:
    """Map a Confluence URL to its local viewer URL."""
    return ResolveResponse(
        url=url,
        local_url=transformer.to_local(url),
        page_id=extract_page_id(url),
        in_scope=transformer.should_transform(url),
    )


@router.get(
    "/api/pages/{page_id}/outline",
    response_class=PlainTextResponse,
    response_model=None,
    responses=COMMON_PAGE_RESPONSES,
)
async def get_page_outline(
    page_id: str,
    client: ConfluenceClient = Depends(get_client),
) -> Response:
    """Return the page's table of contents as an indented text list."""
    options = PipelineOptions(base_url=client.base_url, resolve_media=False, enrich_links=False)
    try:
        result = await mirror_page(page_id, client=client, options=options)
    except PageNotFoundError as exc:
        return _error(status.HTTP_404_NOT_FOUND, str(exc))
    except ParseError as exc:
        return _error(422, str(exc))
    except AuthenticationError as exc:
        logger.error("Confluence rejected credentials for page %s: %s", page_id, exc)
        return _error(status.HTTP_502_BAD_GATEWAY, "Confluence rejected the configured credentials")
    except FetchError as exc:
        logger.warning("Fetching page %s failed: %s", page_id, exc)
        return _error(status.HTTP_502_BAD_GATEWAY, str(exc))

    return PlainTextResponse(render_outline(result.outline))
