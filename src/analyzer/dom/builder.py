# src/analyzer/dom/builder.py
import logging
from typing import List, Optional

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from analyzer.selectors import locate_xpath

logger = logging.getLogger(__name__)


class DocumentLoader:
    """
    Turns raw HTML into the live element tree the analyzer works on, and
    resolves target elements within it.
    """

    def __init__(self, parser: str = "html.parser"):
        self.parser = parser

    def load(self, html: str) -> BeautifulSoup:
        """Parses raw HTML. Empty input yields an empty document."""
        # Basic cleanup of potentially dirty HTML (e.g., BOM)
        clean_html = (html or "").replace('\ufeff', '').strip()
        return BeautifulSoup(clean_html, self.parser)

    def select(self, document: BeautifulSoup, css: str) -> List[Tag]:
        """Returns all elements matching the CSS selector; an invalid selector matches nothing."""
        try:
            return document.select(css)
        except (SelectorSyntaxError, ValueError) as e:
            logger.error(f"Invalid CSS selector '{css}': {e}")
            return []

    def find_target(
            self,
            document: BeautifulSoup,
            css: Optional[str] = None,
            xpath: Optional[str] = None
    ) -> Optional[Tag]:
        """Resolves a single target element by CSS selector or by a generated XPath."""
        if xpath:
            return locate_xpath(document, xpath)
        if css:
            matches = self.select(document, css)
            return matches[0] if matches else None
        return None
