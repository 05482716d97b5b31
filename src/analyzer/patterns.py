# src/analyzer/patterns.py
from typing import List, Optional, Set

from bs4 import Tag

from analyzer.containers import ContainerClassifier
from analyzer.dom.core import attribute_value, children, contains, parent_element, tag_name
from analyzer.dom.models import PatternReport, Relationship, RepeatingStructure
from analyzer.dom.style import StyleResolver
from analyzer.selectors import structure_signature
from analyzer.similarity import calculate_similarity


def determine_relationship(a: Tag, b: Tag) -> Relationship:
    if parent_element(a) is parent_element(b):
        return Relationship.SIBLING
    if contains(a, b):
        return Relationship.PARENT
    if contains(b, a):
        return Relationship.CHILD
    return Relationship.RELATED


def find_common_attributes(elements: List[Tag]) -> Set[str]:
    """Attribute names present on every element."""
    if not elements:
        return set()
    common = set(elements[0].attrs)
    for element in elements[1:]:
        common &= set(element.attrs)
    return common


class PatternDetector:
    """Layout, interaction and repetition patterns around an element."""

    def __init__(self, classifier: ContainerClassifier, style_resolver: StyleResolver):
        self.classifier = classifier
        self.styles = style_resolver

    def detect_layout_pattern(self, element: Tag) -> Optional[str]:
        style = self.styles.computed_style(element)
        if style["display"] == "flex":
            return f"flex-{style['flex-direction']}"
        if style["display"] == "grid":
            return "grid"
        if style["position"] in ("absolute", "fixed"):
            return "positioned"
        if style["float"] != "none":
            return "float"
        return None

    def detect_interaction_pattern(self, element: Tag) -> Optional[str]:
        name = tag_name(element)
        if name == "form":
            return "form"
        if name == "input":
            return "input"
        if element.get("onclick") is not None:
            return "clickable"
        if attribute_value(element, "role") == "button":
            return "button"
        if self.styles.get(element, "cursor") == "pointer":
            return "clickable"
        return None

    def find_similar_structures(self, element: Tag, signature: Optional[str] = None) -> List[Tag]:
        """Same-tag descendants of the closest container sharing the element's structure signature."""
        container = self.classifier.find_closest_container(element)
        if container is None:
            return []
        signature = signature or structure_signature(element)
        return [
            candidate for candidate in container.find_all(tag_name(element))
            if candidate is not element and structure_signature(candidate) == signature
        ]

    def context_elements(self, element: Tag) -> List[Tag]:
        container = self.classifier.find_closest_container(element)
        return children(container) if container is not None else []

    def find_patterns(self, element: Tag) -> PatternReport:
        similar = self.find_similar_structures(element, structure_signature(element))
        return PatternReport(
            repeating_structures=[
                RepeatingStructure(
                    element=other,
                    similarity=calculate_similarity(element, other),
                    relationship=determine_relationship(element, other),
                )
                for other in similar
            ],
            common_attributes=find_common_attributes(self.context_elements(element)),
            layout_pattern=self.detect_layout_pattern(element),
            interaction_pattern=self.detect_interaction_pattern(element),
        )
