# src/inspector/element_info.py
from typing import Any, Dict

from bs4 import Tag

from analyzer.attributes import relevant_attributes
from analyzer.dom.core import attribute_value, class_name, element_id, tag_name
from analyzer.selectors import generate_unique_css_selector, generate_xpath

TEXT_LIMIT = 100

IMPLICIT_ROLES = {
    "a": "link",
    "article": "article",
    "aside": "complementary",
    "button": "button",
    "form": "form",
    "h1": "heading",
    "h2": "heading",
    "h3": "heading",
    "h4": "heading",
    "h5": "heading",
    "h6": "heading",
    "header": "banner",
    "img": "img",
    "li": "listitem",
    "main": "main",
    "nav": "navigation",
    "ol": "list",
    "section": "region",
    "table": "table",
    "ul": "list",
}

INPUT_ROLES = {
    "checkbox": "checkbox",
    "radio": "radio",
    "range": "slider",
    "search": "searchbox",
    "text": "textbox",
    "number": "spinbutton",
}


def get_implicit_role(element: Tag) -> str:
    """ARIA role an element carries without an explicit role attribute ('' when none)."""
    name = tag_name(element)
    if name == "input":
        input_type = (attribute_value(element, "type") or "text").lower()
        return INPUT_ROLES.get(input_type, "textbox")
    return IMPLICIT_ROLES.get(name, "")


def get_element_info(element: Tag) -> Dict[str, Any]:
    """Identity card of a selected element, as sent along with its analysis."""
    return {
        "tagName": tag_name(element),
        "id": element_id(element),
        "className": class_name(element),
        "xpath": generate_xpath(element, use_ids=False),
        "cssSelector": generate_unique_css_selector(element),
        "attributes": relevant_attributes(element),
        "text": element.get_text().strip()[:TEXT_LIMIT],
        "role": attribute_value(element, "role") or get_implicit_role(element),
    }
