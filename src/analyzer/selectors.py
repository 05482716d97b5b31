# src/analyzer/selectors.py
import logging
import re
from typing import List, Optional

from bs4 import Tag
from soupsieve import SelectorSyntaxError

from analyzer.attributes import AttributeFilter, default_filter
from analyzer.dom.core import (
    children,
    class_list,
    class_name,
    document_root,
    element_id,
    is_element,
    parent_element,
    previous_element_siblings,
    tag_name,
)

logger = logging.getLogger(__name__)

_ID_SEGMENT_RE = re.compile(r'^//\*\[@id="(?P<id>[^"]*)"\]$')
_STEP_RE = re.compile(r"^(?P<tag>[a-zA-Z][\w.:-]*)\[(?P<index>\d+)\]$")


def structure_signature(element: Tag) -> str:
    """
    Coarse structural-equality key: tag, class attribute and sorted child tags.
    e.g. 'li[item active]{a,span}'
    """
    child_tags = sorted(tag_name(child) for child in children(element))
    return f"{tag_name(element)}[{class_name(element)}]{{{','.join(child_tags)}}}"


def generate_css_selector(element: Tag) -> str:
    """
    Builds a CSS path from the element upwards.

    The walk stops at the first ancestor carrying an id, which is emitted as
    '#id'. Ids are assumed to be unique; no check against the document is made.
    """
    path: List[str] = []
    current: Optional[Tag] = element
    while current is not None:
        current_id = element_id(current)
        if current_id:
            path.insert(0, f"#{current_id}")
            break
        selector = tag_name(current)
        classes = class_list(current)
        if classes:
            selector += "." + ".".join(classes)
        path.insert(0, selector)
        current = parent_element(current)
    return " > ".join(path)


def _xpath_step(element: Tag) -> str:
    name = tag_name(element)
    index = 1 + sum(1 for sibling in previous_element_siblings(element) if tag_name(sibling) == name)
    return f"{name}[{index}]"


def generate_xpath(element: Tag, use_ids: bool = True) -> str:
    """
    Builds a positional XPath ('tag[n]' steps, n counted among same-tag siblings).

    With `use_ids` the walk stops at the first ancestor carrying an id and the
    path is anchored on '//*[@id="..."]'; otherwise it runs to the document root
    and is absolute.
    """
    steps: List[str] = []
    current: Optional[Tag] = element
    while current is not None:
        current_id = element_id(current)
        if use_ids and current_id:
            steps.insert(0, f'//*[@id="{current_id}"]')
            return "/".join(steps)
        steps.insert(0, _xpath_step(current))
        current = parent_element(current)
    return "/" + "/".join(steps)


def _is_unique(root: Tag, selector: str) -> bool:
    try:
        return len(root.select(selector, limit=2)) == 1
    except (SelectorSyntaxError, ValueError):
        # Class names such as 'w-1/2' are not valid selector syntax unescaped
        return False


def generate_unique_css_selector(element: Tag, attribute_filter: AttributeFilter = default_filter) -> str:
    """
    Stricter CSS path used for a selected element.

    Each level adds identifying attributes ('[name="q"]'), and the walk stops as
    soon as the joined path matches exactly one element in the document. When it
    never becomes unique the full path to the root is returned.
    """
    root = document_root(element)
    path: List[str] = []
    current: Optional[Tag] = element
    while current is not None:
        selector = tag_name(current)
        current_id = element_id(current)
        if current_id:
            path.insert(0, f"{selector}#{current_id}")
            break

        classes = class_list(current)
        if classes:
            selector += "." + ".".join(classes)

        for attr in attribute_filter.relevant_attributes(current):
            if attribute_filter.is_identifying_attribute(attr["name"]):
                selector += f'[{attr["name"]}="{attr["value"]}"]'

        path.insert(0, selector)
        current = parent_element(current)

        if _is_unique(root, " > ".join(path)):
            break

    return " > ".join(path)


def locate_xpath(document: Tag, xpath: str) -> Optional[Tag]:
    """
    Re-resolves an XPath produced by `generate_xpath` against a document.
    Returns None when the path no longer matches or uses an unsupported form.
    """
    if not xpath:
        return None

    if xpath.startswith("//*"):
        anchor, _, rest = xpath.partition("]/")
        match = _ID_SEGMENT_RE.match(anchor if not rest else anchor + "]")
        if not match:
            return None
        current = document.find(attrs={"id": match.group("id")})
        steps = rest.split("/") if rest else []
    elif xpath.startswith("/"):
        current = document
        steps = xpath[1:].split("/")
    else:
        return None

    for step in steps:
        if current is None:
            return None
        match = _STEP_RE.match(step)
        if not match:
            return None
        wanted, index = match.group("tag").lower(), int(match.group("index"))
        same_tag = [child for child in current.children if isinstance(child, Tag) and tag_name(child) == wanted]
        current = same_tag[index - 1] if 0 < index <= len(same_tag) else None

    return current if is_element(current) else None


def locate_css(document: Tag, selector: str) -> Optional[Tag]:
    """Returns the first element matching the CSS selector, or None."""
    try:
        return document.select_one(selector)
    except (SelectorSyntaxError, ValueError) as e:
        logger.debug(f"Could not evaluate selector '{selector}': {e}")
        return None
