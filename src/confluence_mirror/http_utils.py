"""HTTP utilities for calling the Confluence REST API with retry logic and connection pooling."""

from __future__ import annotations

import asyncio
from typing import Any, Final, Mapping

import httpx

from confluence_mirror.config import (
    CONFLUENCE_FETCH_BACKOFF_S,
    CONFLUENCE_FETCH_MAX_RETRIES,
    CONFLUENCE_FETCH_TIMEOUT_S,
    CONFLUENCE_USER_AGENT,
)
from confluence_mirror.exceptions import (
    AuthenticationError,
    FetchError,
    PageNotFoundError,
    RateLimitError,
)

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})
AUTH_STATUS_CODES: Final[frozenset[int]] = frozenset({401, 403})

_MAX_REDIRECTS: Final[int] = 5


async def fetch_json_with_retries(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    headers: Mapping[str, str] | None = None,
    params: Mapping[str, str] | None = None,
) -> Any:
    """GET a JSON resource, retrying transient failures.

    Args:
        url: The URL to fetch.
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.
        headers: Extra request headers (e.g. Authorization).
        params: Query parameters.

    Returns:
        The decoded JSON body.

    Raises:
        PageNotFoundError: On 404.
        AuthenticationError: On 401 or 403.
        RateLimitError: If the last attempt was rejected with 429.
        FetchError: If the fetch fails after all retries or the body is not JSON.
    """
    timeout = httpx.Timeout(CONFLUENCE_FETCH_TIMEOUT_S)
    request_headers = {"User-Agent": CONFLUENCE_USER_AGENT, "Accept": "application/json"}
    if headers:
        request_headers.update(headers)
    last_exc: Exception | None = None

    async def do_fetch(http_client: httpx.AsyncClient) -> Any:
        nonlocal last_exc

        for attempt in range(CONFLUENCE_FETCH_MAX_RETRIES + 1):
            try:
                response = await http_client.get(url, headers=request_headers, params=params)

                if response.status_code == 404:
                    raise PageNotFoundError(f"Resource not found at {url}")
                if response.status_code in AUTH_STATUS_CODES:
                    raise AuthenticationError(f"HTTP {response.status_code} from {url}")

                if response.status_code == 429:
                    last_exc = RateLimitError(f"HTTP 429 from {url}")
                elif response.status_code in RETRY_STATUS_CODES:
                    last_exc = FetchError(f"HTTP {response.status_code} from {url}")
                else:
                    response.raise_for_status()
                    try:
                        return response.json()
                    except ValueError as exc:
                        raise FetchError(f"Invalid JSON from {url}") from exc
            except (httpx.RequestError, httpx.HTTPStatusError) as exc:
                last_exc = exc

            if attempt < CONFLUENCE_FETCH_MAX_RETRIES:
                backoff = CONFLUENCE_FETCH_BACKOFF_S * (2**attempt)
                await asyncio.sleep(backoff)

        if isinstance(last_exc, RateLimitError):
            raise last_exc
        raise FetchError(f"Failed to fetch {url}: {last_exc}")

    if client is not None:
        return await do_fetch(client)

    async with httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    ) as new_client:
        return await do_fetch(new_client)
