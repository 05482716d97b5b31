# src/analyzer/containers.py
import re
from collections import Counter
from typing import List, Optional

from bs4 import Tag

from analyzer.dom.core import (
    attribute_value,
    children,
    class_list,
    class_name,
    document_body,
    element_id,
    parent_element,
    tag_name,
)
from analyzer.dom.style import StyleResolver

CONTAINER_TAGS = {
    "div", "section", "article", "main", "aside", "nav",
    "header", "footer", "form", "ul", "ol", "table",
}

CONTAINER_ROLES = {"group", "list", "grid", "tablist"}

CONTAINER_DISPLAYS = {"flex", "grid", "table"}

LAYOUT_CLASS_RE = re.compile(r"container|wrapper|content|layout|grid|flex|list")

# State classes that change at runtime and must not leak into a signature
TRANSIENT_CLASS_PREFIXES = ("js-", "is-", "has-")
TRANSIENT_CLASSES = {"active", "visible", "hidden"}


def is_transient_class(cls: str) -> bool:
    return cls.startswith(TRANSIENT_CLASS_PREFIXES) or cls in TRANSIENT_CLASSES


class ContainerClassifier:
    """Decides whether an element groups or lays out its children, and fingerprints it."""

    def __init__(self, style_resolver: Optional[StyleResolver] = None):
        self.styles = style_resolver or StyleResolver()

    def is_likely_container(self, element: Tag) -> bool:
        if tag_name(element) in CONTAINER_TAGS:
            return True

        role = attribute_value(element, "role")
        if role and role in CONTAINER_ROLES:
            return True

        if LAYOUT_CLASS_RE.search(class_name(element).lower()):
            return True

        if self.styles.get(element, "display") in CONTAINER_DISPLAYS:
            return True

        kids = children(element)
        if len(kids) > 1:
            shapes = Counter((tag_name(kid), class_name(kid)) for kid in kids)
            if max(shapes.values()) > 1:
                return True

        return False

    def container_signature(self, element: Tag) -> str:
        """
        Builds 'tag#id.cls1.cls2[role="x"]{child,tags}'. Elements with equal
        signatures are interchangeable for grouping purposes.
        """
        parts: List[str] = [tag_name(element)]

        current_id = element_id(element)
        if current_id:
            parts.append(f"#{current_id}")

        significant = [cls for cls in class_list(element) if not is_transient_class(cls)]
        if significant:
            parts.append("." + ".".join(significant))

        role = attribute_value(element, "role")
        if role:
            parts.append(f'[role="{role}"]')

        child_tags = sorted(tag_name(kid) for kid in children(element))
        parts.append("{" + ",".join(child_tags) + "}")

        return "".join(parts)

    def find_closest_container(self, element: Tag) -> Optional[Tag]:
        """
        Returns the nearest ancestor classified as a container, stopping below
        <body>. Falls back to the document body (None for body-less trees).
        """
        body = document_body(element)
        current = parent_element(element)
        while current is not None and current is not body:
            if self.is_likely_container(current):
                return current
            current = parent_element(current)
        return body
