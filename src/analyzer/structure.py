# src/analyzer/structure.py
from typing import Optional

from bs4 import Tag

from analyzer.containers import ContainerClassifier
from analyzer.dom.core import children, document_body, parent_element
from analyzer.dom.models import StructureReport
from analyzer.similarity import SIMILAR_SIBLING_THRESHOLD, calculate_similarity


class StructureAnalyzer:
    """Describes where an element sits in the tree and whether it repeats."""

    def __init__(self, classifier: ContainerClassifier):
        self.classifier = classifier

    def count_similar(self, element: Tag, parent: Tag) -> int:
        return sum(
            1 for sibling in children(parent)
            if sibling is not element and calculate_similarity(element, sibling) > SIMILAR_SIBLING_THRESHOLD
        )

    def analyze_structure(self, element: Tag) -> StructureReport:
        body = document_body(element)
        depth = 0
        container_signature: Optional[str] = None

        # Sibling counts come from the last level of the walk: the topmost
        # ancestor below <body>, comparing the path node directly under it.
        top_child: Optional[Tag] = None
        top_parent: Optional[Tag] = None

        current, parent = element, parent_element(element)
        while parent is not None and parent is not body:
            depth += 1
            if container_signature is None and self.classifier.is_likely_container(parent):
                container_signature = self.classifier.container_signature(parent)
            top_child, top_parent = current, parent
            current, parent = parent, parent_element(parent)

        sibling_count = 0
        similar_count = 0
        if top_parent is not None:
            sibling_count = len(children(top_parent))
            similar_count = self.count_similar(top_child, top_parent)

        is_repeating = similar_count > 0
        return StructureReport(
            depth=depth,
            sibling_count=sibling_count,
            similar_sibling_count=similar_count,
            child_count=len(children(element)),
            is_repeating=is_repeating,
            container_signature=container_signature,
            pattern_group_signature=self.identify_pattern_group(element, body) if is_repeating else None,
        )

    def identify_pattern_group(self, element: Tag, body: Optional[Tag] = None) -> Optional[str]:
        """Signature of the nearest container that holds children similar to the element."""
        if body is None:
            body = document_body(element)
        container = parent_element(element)
        while container is not None and container is not body:
            if self.classifier.is_likely_container(container) and self.count_similar(element, container) > 0:
                return self.classifier.container_signature(container)
            container = parent_element(container)
        return None
