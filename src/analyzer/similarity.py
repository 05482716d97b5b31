# src/analyzer/similarity.py
from bs4 import Tag

from analyzer.dom.core import class_list, tag_name
from analyzer.selectors import structure_signature

# Siblings above this score count as repeats of the element (structure analysis)
SIMILAR_SIBLING_THRESHOLD = 0.8

# Container children above this score are reported as related elements
RELATED_THRESHOLD = 0.5


def class_overlap(a: Tag, b: Tag) -> float:
    """Shared classes divided by the larger class set; 0.0 when both sets are empty."""
    classes_a, classes_b = set(class_list(a)), set(class_list(b))
    largest = max(len(classes_a), len(classes_b))
    if largest == 0:
        return 0.0
    return len(classes_a & classes_b) / largest


def calculate_similarity(a: Tag, b: Tag) -> float:
    """
    Scores two elements in [0, 1] as the mean of three checks:
    tag equality, class-set overlap and structure-signature equality.
    """
    if a is b:
        return 1.0

    score = 0.0
    if tag_name(a) == tag_name(b):
        score += 1
    score += class_overlap(a, b)
    if structure_signature(a) == structure_signature(b):
        score += 1
    return score / 3
