# tests/analyzer/test_style.py
from analyzer.dom.style import StyleResolver, parse_inline_style


def test_parse_inline_style():
    assert parse_inline_style("display: Flex; float:left !important;position :absolute") == {
        "display": "flex",
        "float": "left",
        "position": "absolute",
    }
    assert parse_inline_style(None) == {}
    assert parse_inline_style("") == {}


def test_user_agent_display_defaults(make_document):
    doc = make_document("<table><tr><td>1</td></tr></table><ul><li>a</li></ul><span>s</span><div></div>")
    styles = StyleResolver()
    assert styles.get(doc.table, "display") == "table"
    assert styles.get(doc.td, "display") == "table-cell"
    assert styles.get(doc.li, "display") == "list-item"
    assert styles.get(doc.span, "display") == "inline"
    assert styles.get(doc.div, "display") == "block"
    assert styles.get(doc.head, "display") == "none"


def test_provider_overrides_inline_style(make_document):
    doc = make_document('<div style="display:block">x</div>')
    styles = StyleResolver(provider=lambda el: {"display": "grid"} if el.name == "div" else None)
    assert styles.get(doc.div, "display") == "grid"
    assert StyleResolver().get(doc.div, "display") == "block"


def test_cursor_is_inherited_from_links(make_document):
    doc = make_document('<a href="/x"><span>link</span></a><p><span>plain</span></p>')
    styles = StyleResolver()
    link_span, plain_span = doc.find_all("span")
    assert styles.get(link_span, "cursor") == "pointer"
    assert styles.get(plain_span, "cursor") == "auto"


def test_computed_style_defaults(make_document):
    doc = make_document("<p>x</p>")
    assert StyleResolver().computed_style(doc.p) == {
        "display": "block",
        "flex-direction": "row",
        "position": "static",
        "float": "none",
        "cursor": "auto",
    }
