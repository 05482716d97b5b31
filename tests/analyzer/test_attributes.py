# tests/analyzer/test_attributes.py
from analyzer.attributes import AttributeFilter, is_identifying_attribute, relevant_attributes


def test_relevant_attributes_drop_noise(make_document):
    doc = make_document(
        '<button id="go" class="btn" style="color:red" aria-label="Go" data-v-1a2b="" '
        'data-reactid="4" ng-click="x()" type="submit" data-testid="go-btn" title="Go!">Go</button>'
    )
    attrs = relevant_attributes(doc.button)
    assert attrs == [
        {"name": "type", "value": "submit"},
        {"name": "data-testid", "value": "go-btn"},
        {"name": "title", "value": "Go!"},
    ]


def test_id_class_style_are_never_relevant():
    """Even a filter with extra rules keeps the core exclusions."""
    attribute_filter = AttributeFilter(extra_excluded=["title"], extra_prefixes=["x-"])
    for name in ("id", "class", "style", "ID", "title", "x-data", "aria-hidden"):
        assert not attribute_filter.is_relevant(name)
    assert attribute_filter.is_relevant("href")


def test_identifying_attributes():
    assert is_identifying_attribute("name")
    assert is_identifying_attribute("data-testid")
    assert not is_identifying_attribute("href")
    assert AttributeFilter(extra_identifying=["href"]).is_identifying_attribute("href")
