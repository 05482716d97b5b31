# src/analyzer/attributes.py
from typing import Dict, Iterable, List, Optional

from bs4 import Tag

from analyzer.dom.core import attribute_value

EXCLUDED_ATTRIBUTES = ("id", "class", "style")

# aria-*, Vue scoping (data-v-*), React render markers (data-react*), Angular directives (ng-*)
EXCLUDED_PREFIXES = ("aria-", "data-v-", "data-react", "ng-")

IDENTIFYING_ATTRIBUTES = ("name", "type", "role", "data-testid", "data-id")


class AttributeFilter:
    """
    Separates an element's identifying attributes from noise.

    The exclusion and identifying lists can be extended per instance; `id`,
    `class` and `style` are always excluded.
    """

    def __init__(
            self,
            extra_excluded: Optional[Iterable[str]] = None,
            extra_prefixes: Optional[Iterable[str]] = None,
            extra_identifying: Optional[Iterable[str]] = None
    ):
        self.excluded = set(EXCLUDED_ATTRIBUTES) | {n.lower() for n in (extra_excluded or [])}
        self.prefixes = tuple(EXCLUDED_PREFIXES) + tuple(p.lower() for p in (extra_prefixes or []))
        self.identifying = set(IDENTIFYING_ATTRIBUTES) | {n.lower() for n in (extra_identifying or [])}

    def is_relevant(self, name: str) -> bool:
        name = name.lower()
        return name not in self.excluded and not name.startswith(self.prefixes)

    def relevant_attributes(self, element: Tag) -> List[Dict[str, str]]:
        """Returns the element's non-noise attributes as {name, value} pairs, in source order."""
        return [
            {"name": name, "value": attribute_value(element, name) or ""}
            for name in element.attrs
            if self.is_relevant(name)
        ]

    def is_identifying_attribute(self, name: str) -> bool:
        return name.lower() in self.identifying


default_filter = AttributeFilter()


def relevant_attributes(element: Tag) -> List[Dict[str, str]]:
    return default_filter.relevant_attributes(element)


def is_identifying_attribute(name: str) -> bool:
    return default_filter.is_identifying_attribute(name)
