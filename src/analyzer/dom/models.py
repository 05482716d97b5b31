# src/analyzer/dom/models.py
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set

from bs4 import Tag
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .core import class_name, element_id, tag_name

# Renders an element reference for the outbound payload
ElementDescriber = Callable[[Tag], Dict[str, Any]]


class Relationship(str, Enum):
    SIBLING = "sibling"
    PARENT = "parent"
    CHILD = "child"
    RELATED = "related"


class ReportModel(BaseModel):
    """Base for all analysis reports: immutable snapshots with camelCase payload keys."""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        arbitrary_types_allowed=True,
    )


class StructureReport(ReportModel):
    depth: int = Field(default=0, ge=0)
    sibling_count: int = Field(default=0, ge=0)
    similar_sibling_count: int = Field(default=0, ge=0)
    child_count: int = Field(default=0, ge=0)
    is_repeating: bool = False
    container_signature: Optional[str] = None
    pattern_group_signature: Optional[str] = None

    @model_validator(mode="after")
    def validate_repetition(self):
        """A structure repeats exactly when it has similar siblings; only then may it carry a pattern group."""
        if self.is_repeating != (self.similar_sibling_count > 0):
            raise ValueError("is_repeating must equal similar_sibling_count > 0")
        if self.pattern_group_signature is not None and not self.is_repeating:
            raise ValueError("pattern_group_signature requires a repeating structure")
        return self


class RepeatingStructure(ReportModel):
    element: Tag
    similarity: float = Field(ge=0.0, le=1.0)
    relationship: Relationship


class PatternReport(ReportModel):
    repeating_structures: List[RepeatingStructure] = Field(default_factory=list)
    common_attributes: Set[str] = Field(default_factory=set)
    layout_pattern: Optional[str] = None
    interaction_pattern: Optional[str] = None


class SelectorPair(ReportModel):
    css: str
    xpath: str


def describe_element(element: Tag) -> Dict[str, Any]:
    """Minimal JSON-safe description of an element reference."""
    return {
        "tagName": tag_name(element),
        "id": element_id(element),
        "className": class_name(element),
    }


class AnalysisReport(ReportModel):
    """
    Aggregate report for one element.

    `structure` and `selectors` are None only in the empty report returned for
    invalid input or a failed analysis.
    """
    structure: Optional[StructureReport] = None
    patterns: PatternReport = Field(default_factory=PatternReport)
    relationships: List[Tag] = Field(default_factory=list)
    selectors: Optional[SelectorPair] = None

    @classmethod
    def empty(cls) -> "AnalysisReport":
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.structure is None and self.selectors is None

    def to_payload(self, describe: ElementDescriber = describe_element) -> Dict[str, Any]:
        """
        Renders the report as a JSON-serializable dictionary.
        Missing sub-reports are rendered as empty objects.
        """
        if self.is_empty:
            return {
                "structure": {},
                "patterns": {"repeatingStructures": []},
                "relationships": [],
                "selectors": {},
            }

        patterns = self.patterns
        return {
            "structure": self.structure.model_dump(by_alias=True) if self.structure else {},
            "patterns": {
                "repeatingStructures": [
                    {
                        "element": describe(item.element),
                        "similarity": item.similarity,
                        "relationship": item.relationship.value,
                    }
                    for item in patterns.repeating_structures
                ],
                "commonAttributes": sorted(patterns.common_attributes),
                "layoutPattern": patterns.layout_pattern,
                "interactionPattern": patterns.interaction_pattern,
            },
            "relationships": [describe(element) for element in self.relationships],
            "selectors": self.selectors.model_dump() if self.selectors else {},
        }
