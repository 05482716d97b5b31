# src/analyzer/dom/style.py
import re
from typing import Callable, Dict, Mapping, Optional

from bs4 import Tag

from .core import attribute_value, parent_element, tag_name

# Type alias for a caller-supplied style source (e.g. a snapshot from a real browser)
StyleProvider = Callable[[Tag], Optional[Mapping[str, str]]]

BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "body", "dd", "details", "dialog",
    "div", "dl", "dt", "fieldset", "figcaption", "figure", "footer", "form",
    "h1", "h2", "h3", "h4", "h5", "h6", "header", "hgroup", "hr", "html", "main",
    "nav", "ol", "p", "pre", "section", "summary", "ul",
}

UA_DISPLAY = {
    "table": "table",
    "caption": "table-caption",
    "thead": "table-header-group",
    "tbody": "table-row-group",
    "tfoot": "table-footer-group",
    "tr": "table-row",
    "td": "table-cell",
    "th": "table-cell",
    "col": "table-column",
    "colgroup": "table-column-group",
    "li": "list-item",
    "img": "inline-block",
    "button": "inline-block",
    "input": "inline-block",
    "select": "inline-block",
    "textarea": "inline-block",
}

HIDDEN_TAGS = {"head", "script", "style", "template", "meta", "link", "title", "noscript"}

INHERITED_PROPERTIES = {"cursor"}

DEFAULTS = {
    "flex-direction": "row",
    "position": "static",
    "float": "none",
    "cursor": "auto",
}

_DECLARATION_RE = re.compile(r"\s*([-a-zA-Z]+)\s*:\s*([^;]+?)\s*(?:!important\s*)?(?:;|$)")


def parse_inline_style(style: Optional[str]) -> Dict[str, str]:
    """Parses a style attribute ("display: flex; float:left") into a property map."""
    if not style:
        return {}
    declarations = {}
    for match in _DECLARATION_RE.finditer(style):
        declarations[match.group(1).lower()] = match.group(2).strip().lower()
    return declarations


class StyleResolver:
    """
    Resolves computed style properties for an element.

    Precedence (highest first): the optional provider, the inline style attribute,
    user-agent defaults. Inherited properties fall back to the parent's value.
    """

    def __init__(self, provider: Optional[StyleProvider] = None):
        self.provider = provider

    def _declared(self, element: Tag) -> Dict[str, str]:
        declared = parse_inline_style(attribute_value(element, "style"))
        if self.provider:
            provided = self.provider(element)
            if provided:
                declared.update({k.lower(): str(v).lower() for k, v in provided.items()})
        return declared

    def _ua_default(self, element: Tag, prop: str) -> str:
        name = tag_name(element)
        if prop == "display":
            if name in HIDDEN_TAGS:
                return "none"
            if name in UA_DISPLAY:
                return UA_DISPLAY[name]
            return "block" if name in BLOCK_TAGS else "inline"
        if prop == "cursor" and name == "a" and element.get("href") is not None:
            return "pointer"
        return DEFAULTS.get(prop, "")

    def get(self, element: Tag, prop: str) -> str:
        """Returns the computed value of a single CSS property."""
        prop = prop.lower()
        declared = self._declared(element)
        value = declared.get(prop)
        if value and value not in ("inherit", "initial", "unset"):
            return value

        if prop in INHERITED_PROPERTIES and value != "initial":
            default = self._ua_default(element, prop)
            if default != DEFAULTS.get(prop):
                return default
            parent = parent_element(element)
            if parent is not None:
                return self.get(parent, prop)
            return default

        return self._ua_default(element, prop)

    def computed_style(self, element: Tag) -> Dict[str, str]:
        """Returns the subset of computed properties the analyzer reads."""
        return {
            prop: self.get(element, prop)
            for prop in ("display", "flex-direction", "position", "float", "cursor")
        }
