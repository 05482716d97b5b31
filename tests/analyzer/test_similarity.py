# tests/analyzer/test_similarity.py
import itertools

import pytest

from analyzer.similarity import calculate_similarity, class_overlap

PAGE = """
<ul class="menu">
  <li class="item">A</li>
  <li class="item">B</li>
  <li class="item active">C</li>
</ul>
<div class="a"><p>x</p></div>
<span class="b"></span>
<table><tr><td>1</td><td>2</td></tr></table>
"""


@pytest.fixture
def doc(make_document):
    return make_document(PAGE)


def test_self_similarity_is_one(doc):
    for element in doc.find_all(True):
        assert calculate_similarity(element, element) == 1.0


def test_disjoint_elements_score_zero(doc):
    assert calculate_similarity(doc.find("div", class_="a"), doc.find("span", class_="b")) == 0.0


def test_identical_items(doc):
    first, second, _ = doc.find_all("li")
    assert calculate_similarity(first, second) == 1.0


def test_partial_class_overlap(doc):
    first, _, active = doc.find_all("li")
    # same tag (1) + half the classes shared (0.5) + different signature (0)
    assert class_overlap(first, active) == 0.5
    assert calculate_similarity(first, active) == pytest.approx(0.5)


def test_classless_elements_do_not_share_classes(doc):
    first, second = doc.find_all("td")
    assert class_overlap(first, second) == 0.0
    assert calculate_similarity(first, second) == pytest.approx(2 / 3)


def test_similarity_is_symmetric_and_bounded(doc):
    elements = doc.body.find_all(True)
    for a, b in itertools.combinations(elements, 2):
        score = calculate_similarity(a, b)
        assert 0.0 <= score <= 1.0
        assert score == calculate_similarity(b, a)
