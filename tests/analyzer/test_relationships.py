# tests/analyzer/test_relationships.py
from unittest.mock import patch

import pytest

from analyzer.containers import ContainerClassifier
from analyzer.relationships import RelationshipCache, RelationshipFinder


@pytest.fixture
def finder():
    return RelationshipFinder(ContainerClassifier())


def test_form_control_finds_its_label(make_document, finder):
    doc = make_document('<label for="x">Name</label><input id="x">')
    assert finder.find_relationships(doc.input) == [doc.label]


def test_input_without_id_has_no_label(make_document, finder):
    doc = make_document('<label for="x">Name</label><input name="x">')
    assert finder.find_relationships(doc.input) == []


def test_table_cell_relates_to_row_cells_once(make_document, finder):
    doc = make_document("<table><tr><td>1</td><td>2</td><td>3</td></tr></table>")
    first, second, third = doc.find_all("td")

    related = finder.find_relationships(second)

    # similar siblings and row cells overlap; each appears once
    assert len(related) == 2
    assert related[0] is first
    assert related[1] is third


def test_list_item_relates_to_other_items(make_document, finder):
    doc = make_document("<ul>" + "".join(f"<li>{i}</li>" for i in range(5)) + "</ul>")
    items = doc.find_all("li")

    related = finder.find_relationships(items[2])

    assert len(related) == 4
    assert all(other is not items[2] for other in related)
    assert {id(el) for el in related} == {id(el) for el in items if el is not items[2]}


def test_generic_element_uses_similarity_only(make_document, finder):
    doc = make_document('<div class="cards"><article class="card">a</article>'
                        '<article class="card">b</article><h2>t</h2></div>')
    first, second = doc.find_all("article")
    assert finder.find_relationships(first) == [second]


def test_body_less_fragment_has_no_relationships(make_document, finder):
    doc = make_document("<p><b>x</b><i>y</i></p>", wrap=False)
    assert finder.find_relationships(doc.b) == []


def test_relationships_are_memoized(make_document, finder):
    doc = make_document("<ul><li>a</li><li>b</li></ul>")
    item = doc.li

    with patch.object(finder, "_compute", wraps=finder._compute) as compute:
        first = finder.find_relationships(item)
        second = finder.find_relationships(item)

    assert compute.call_count == 1
    assert first is second
    assert len(finder.cache) == 1


def test_cache_clear_forces_recompute(make_document, finder):
    doc = make_document("<ul><li>a</li><li>b</li></ul>")
    finder.find_relationships(doc.li)
    finder.cache.clear()

    with patch.object(finder, "_compute", wraps=finder._compute) as compute:
        finder.find_relationships(doc.li)

    assert compute.call_count == 1


def test_cache_is_keyed_by_identity(make_document):
    """Two equal-looking elements never share a cache entry."""
    doc = make_document("<ul><li>a</li><li>a</li></ul>")
    first, second = doc.find_all("li")
    assert first == second  # bs4 compares tags by value

    cache = RelationshipCache()
    cache.put(first, [second])
    assert cache.get(first) == [second]
    assert cache.get(second) is None
