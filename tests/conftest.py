"""Test setup for confluence_mirror."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    Integration tests talk to a real Confluence site:
        pytest -m integration       # run only integration tests
        pytest -m "not integration" # skip integration tests
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (make real network calls)",
    )


BASE_URL = "https://acme.atlassian.net"


@pytest.fixture
def base_url() -> str:
    """Confluence instance used throughout the tests."""
    return BASE_URL


@pytest.fixture
def storage_html() -> str:
    """Storage-format body listing an image and a PDF attachment."""
    return """
    <p>Architecture</p>
    <ac:image ac:width="600"><ri:attachment ri:filename="diagram.png" /></ac:image>
    <p>See the notes:</p>
    <ac:link><ri:attachment ri:filename="notes.pdf" ri:version-at-save="2"/></ac:link>
    <ac:image><ri:attachment ri:filename="diagram.png" /></ac:image>
    """
