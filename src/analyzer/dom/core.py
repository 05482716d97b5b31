# src/analyzer/dom/core.py
from enum import Enum
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

FORM_CONTROL_TAGS = {"input", "select", "textarea"}
TABLE_CELL_TAGS = {"td", "th"}
LIST_ITEM_TAGS = {"li"}


class ElementKind(str, Enum):
    """Closed classification of an element, used for semantic relationship dispatch."""
    GENERIC = "genericElement"
    FORM_CONTROL = "formControl"
    TABLE_CELL = "tableCell"
    LIST_ITEM = "listItem"


def is_element(node: object) -> bool:
    """
    Returns True if the node is an element of a document tree.
    The BeautifulSoup object itself is the document node, not an element.
    """
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def tag_name(element: Tag) -> str:
    return (element.name or "").lower()


def element_id(element: Tag) -> str:
    """Returns the id attribute, or an empty string when absent."""
    value = element.get("id")
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


def class_list(element: Tag) -> List[str]:
    """Returns the element's class tokens without duplicates, in attribute order."""
    raw = element.get("class") or []
    if isinstance(raw, str):
        raw = raw.split()
    seen = []
    for cls in raw:
        if cls and cls not in seen:
            seen.append(cls)
    return seen


def class_name(element: Tag) -> str:
    """Returns the full class attribute as a single string (the DOM className)."""
    raw = element.get("class") or []
    if isinstance(raw, str):
        return raw
    return " ".join(raw)


def attribute_value(element: Tag, name: str) -> Optional[str]:
    """Returns an attribute as a string; multi-valued attributes are joined with spaces."""
    value = element.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def children(element: Tag) -> List[Tag]:
    """Direct element children, skipping text and comment nodes."""
    return [child for child in element.children if is_element(child)]


def parent_element(element: Tag) -> Optional[Tag]:
    parent = element.parent
    return parent if is_element(parent) else None


def previous_element_siblings(element: Tag) -> List[Tag]:
    return [sib for sib in element.previous_siblings if is_element(sib)]


def document_root(element: Tag) -> Tag:
    """Returns the topmost node of the tree the element belongs to."""
    node = element
    while node.parent is not None:
        node = node.parent
    return node


def document_body(element: Tag) -> Optional[Tag]:
    """Returns the <body> of the element's document, or None for body-less or detached trees."""
    for ancestor in element.parents:
        if is_element(ancestor) and tag_name(ancestor) == "body":
            return ancestor
    root = document_root(element)
    if is_element(root) and tag_name(root) == "body":
        return root
    return root.find("body")


def contains(ancestor: Tag, node: Tag) -> bool:
    """DOM Node.contains(): inclusive descendant check by identity."""
    current = node
    while current is not None:
        if current is ancestor:
            return True
        current = current.parent
    return False


def unique_by_identity(elements: List[Tag]) -> List[Tag]:
    result: List[Tag] = []
    seen = set()
    for element in elements:
        if id(element) in seen:
            continue
        seen.add(id(element))
        result.append(element)
    return result


def classify(element: Tag) -> ElementKind:
    """Maps the element's tag onto an ElementKind."""
    name = tag_name(element)
    if name in FORM_CONTROL_TAGS:
        return ElementKind.FORM_CONTROL
    if name in TABLE_CELL_TAGS:
        return ElementKind.TABLE_CELL
    if name in LIST_ITEM_TAGS:
        return ElementKind.LIST_ITEM
    return ElementKind.GENERIC
