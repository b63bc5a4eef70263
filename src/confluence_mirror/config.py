"""Local configuration for confluence_mirror."""

from __future__ import annotations

import os


DEFAULT_LOCAL_BASE_URL = "http://localhost:3000"
DEFAULT_FETCH_TIMEOUT_S = 10.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_LINK_FETCH_TIMEOUT_S = 10.0
DEFAULT_LINK_MAX_CONCURRENCY = 8
DEFAULT_USER_AGENT = "confluence-mirror/0.1"

# Confluence instance, e.g. https://your-domain.atlassian.net (no /wiki suffix).
CONFLUENCE_BASE_URL = os.getenv("CONFLUENCE_BASE_URL", "").rstrip("/")
CONFLUENCE_EMAIL = os.getenv("CONFLUENCE_EMAIL", "")
CONFLUENCE_API_TOKEN = os.getenv("CONFLUENCE_API_TOKEN", "")
CONFLUENCE_LOCAL_BASE_URL = os.getenv("CONFLUENCE_LOCAL_BASE_URL", DEFAULT_LOCAL_BASE_URL).rstrip("/")
CONFLUENCE_FETCH_TIMEOUT_S = float(os.getenv("CONFLUENCE_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
CONFLUENCE_FETCH_MAX_RETRIES = int(os.getenv("CONFLUENCE_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES)))
CONFLUENCE_FETCH_BACKOFF_S = float(os.getenv("CONFLUENCE_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S)))
CONFLUENCE_LINK_FETCH_TIMEOUT_S = float(
    os.getenv("CONFLUENCE_LINK_FETCH_TIMEOUT_S", str(DEFAULT_LINK_FETCH_TIMEOUT_S))
)
CONFLUENCE_LINK_MAX_CONCURRENCY = int(
    os.getenv("CONFLUENCE_LINK_MAX_CONCURRENCY", str(DEFAULT_LINK_MAX_CONCURRENCY))
)
CONFLUENCE_USER_AGENT = os.getenv("CONFLUENCE_USER_AGENT", DEFAULT_USER_AGENT)
