import pytest
from bs4 import BeautifulSoup

from analyzer.dom.builder import DocumentLoader


@pytest.fixture
def make_document():
    """Parses an HTML snippet; body-only snippets are wrapped in <html><body>."""
    loader = DocumentLoader()

    def _make(html: str, wrap: bool = True) -> BeautifulSoup:
        if wrap:
            html = f"<html><head></head><body>{html}</body></html>"
        return loader.load(html)

    return _make
