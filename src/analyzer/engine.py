# src/analyzer/engine.py
import logging
from typing import Any, Optional

from analyzer.containers import ContainerClassifier
from analyzer.dom.core import is_element
from analyzer.dom.models import AnalysisReport, SelectorPair
from analyzer.dom.style import StyleProvider, StyleResolver
from analyzer.patterns import PatternDetector
from analyzer.relationships import RelationshipCache, RelationshipFinder
from analyzer.selectors import generate_css_selector, generate_xpath
from analyzer.structure import StructureAnalyzer

logger = logging.getLogger(__name__)


class ElementAnalyzer:
    """
    Public entry point of the structural analysis engine.

    One instance serves one inspection session: it owns the relationship cache,
    which `reset_session()` clears. `analyze_element` never raises; invalid
    input and internal faults both yield the empty report.
    """

    def __init__(
            self,
            style_provider: Optional[StyleProvider] = None,
            style_resolver: Optional[StyleResolver] = None
    ):
        self.styles = style_resolver or StyleResolver(style_provider)
        self.classifier = ContainerClassifier(self.styles)
        self.cache = RelationshipCache()
        self.structure = StructureAnalyzer(self.classifier)
        self.patterns = PatternDetector(self.classifier, self.styles)
        self.relationships = RelationshipFinder(self.classifier, self.cache)

    def generate_selectors(self, element) -> SelectorPair:
        return SelectorPair(css=generate_css_selector(element), xpath=generate_xpath(element))

    def analyze_element(self, element: Any) -> AnalysisReport:
        if not is_element(element):
            logger.warning("Invalid element provided to analyze_element: %r", type(element).__name__)
            return AnalysisReport.empty()

        try:
            return AnalysisReport(
                structure=self.structure.analyze_structure(element),
                patterns=self.patterns.find_patterns(element),
                relationships=self.relationships.find_relationships(element),
                selectors=self.generate_selectors(element),
            )
        except Exception as e:
            logger.error(f"Error analyzing <{getattr(element, 'name', '?')}> element: {e}", exc_info=True)
            return AnalysisReport.empty()

    def reset_session(self) -> None:
        """Ends the current analysis session by dropping all cached relationship sets."""
        self.cache.clear()
