# src/analyzer/relationships.py
import logging
from typing import Dict, List, Optional, Tuple

from bs4 import Tag

from analyzer.containers import ContainerClassifier
from analyzer.dom.core import (
    ElementKind,
    children,
    classify,
    element_id,
    parent_element,
    tag_name,
    unique_by_identity,
)
from analyzer.similarity import RELATED_THRESHOLD, calculate_similarity

logger = logging.getLogger(__name__)


class RelationshipCache:
    """
    Session-scoped memo of relationship sets, keyed by element identity.

    The cached tag is stored next to its result so its id() cannot be reused
    while the entry lives. Cleared explicitly when the session ends.
    """

    def __init__(self):
        self._entries: Dict[int, Tuple[Tag, List[Tag]]] = {}

    def get(self, element: Tag) -> Optional[List[Tag]]:
        entry = self._entries.get(id(element))
        if entry is None or entry[0] is not element:
            return None
        return entry[1]

    def put(self, element: Tag, relationships: List[Tag]) -> None:
        self._entries[id(element)] = (element, relationships)

    def clear(self) -> None:
        if self._entries:
            logger.debug(f"Dropping {len(self._entries)} cached relationship sets.")
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class RelationshipFinder:
    """Finds structurally similar and semantically linked elements."""

    def __init__(self, classifier: ContainerClassifier, cache: Optional[RelationshipCache] = None):
        self.classifier = classifier
        self.cache = cache if cache is not None else RelationshipCache()

    def find_relationships(self, element: Tag) -> List[Tag]:
        cached = self.cache.get(element)
        if cached is not None:
            return cached

        relationships = self._compute(element)
        self.cache.put(element, relationships)
        return relationships

    def _compute(self, element: Tag) -> List[Tag]:
        container = self.classifier.find_closest_container(element)
        if container is None:
            return []

        related = [
            child for child in children(container)
            if child is not element and calculate_similarity(element, child) > RELATED_THRESHOLD
        ]
        related.extend(self.find_semantic_relationships(element, container))
        return unique_by_identity(related)

    def find_semantic_relationships(self, element: Tag, container: Tag) -> List[Tag]:
        kind = classify(element)

        if kind is ElementKind.FORM_CONTROL:
            control_id = element_id(element)
            if not control_id:
                return []
            label = container.find("label", attrs={"for": control_id})
            return [label] if label is not None else []

        if kind is ElementKind.TABLE_CELL:
            row = parent_element(element)
            if row is None:
                return []
            return [cell for cell in children(row) if cell is not element and tag_name(cell) in ("td", "th")]

        if kind is ElementKind.LIST_ITEM:
            parent_list = parent_element(element)
            if parent_list is None:
                return []
            return [item for item in children(parent_list) if item is not element]

        return []
