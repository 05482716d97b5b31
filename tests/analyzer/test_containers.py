# tests/analyzer/test_containers.py
import pytest

from analyzer.containers import ContainerClassifier, is_transient_class
from analyzer.dom.style import StyleResolver


@pytest.fixture
def classifier():
    return ContainerClassifier(StyleResolver())


@pytest.mark.parametrize("html", [
    "<ul><li>a</li></ul>",
    '<span role="list"></span>',
    '<span class="product-grid"></span>',
    '<span style="display: flex"></span>',
    '<span><em class="x"></em><em class="x"></em></span>',
])
def test_is_likely_container(make_document, classifier, html):
    doc = make_document(html)
    assert classifier.is_likely_container(doc.body.find(True))


@pytest.mark.parametrize("html", [
    "<span>plain</span>",
    "<p><span></span><em></em></p>",
    '<span role="button"></span>',
])
def test_is_not_container(make_document, classifier, html):
    doc = make_document(html)
    assert not classifier.is_likely_container(doc.body.find(True))


def test_table_row_with_cells_is_container(make_document, classifier):
    doc = make_document("<table><tr><td>1</td><td>2</td></tr></table>")
    assert classifier.is_likely_container(doc.tr)


def test_container_signature_skips_transient_classes(make_document, classifier):
    doc = make_document(
        '<div id="cards" class="cards js-hook is-open has-items active visible hidden activeTab" role="list">'
        "<article></article><a></a><article></article></div>"
    )
    assert classifier.container_signature(doc.div) == 'div#cards.cards.activeTab[role="list"]{a,article,article}'


def test_transient_class_rules():
    assert is_transient_class("js-toggle")
    assert is_transient_class("is-open")
    assert is_transient_class("active")
    assert not is_transient_class("activeTab")
    assert not is_transient_class("card")


def test_closest_container(make_document, classifier):
    doc = make_document('<section><p><span id="t">x</span></p></section><input id="direct">')
    assert classifier.find_closest_container(doc.find(id="t")) is doc.section
    assert classifier.find_closest_container(doc.find(id="direct")) is doc.body


def test_closest_container_without_body(make_document, classifier):
    doc = make_document("<span><b>x</b></span>", wrap=False)
    assert classifier.find_closest_container(doc.b) is None
