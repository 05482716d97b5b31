# tests/inspector/test_element_info.py
import pytest

from inspector.element_info import get_element_info, get_implicit_role


@pytest.mark.parametrize("html, role", [
    ('<a href="#">x</a>', "link"),
    ("<nav></nav>", "navigation"),
    ("<h3>t</h3>", "heading"),
    ('<input type="checkbox">', "checkbox"),
    ("<input>", "textbox"),
    ('<input type="email">', "textbox"),
    ('<input type="range">', "slider"),
    ("<span>x</span>", ""),
])
def test_implicit_roles(make_document, html, role):
    doc = make_document(html)
    assert get_implicit_role(doc.body.find(True)) == role


def test_element_info(make_document):
    doc = make_document(
        '<div id="app"><form><input class="field wide" type="text" name="q" '
        'aria-label="Search" role="searchbox" style="width:10px"></form></div>'
    )
    info = get_element_info(doc.input)

    assert info == {
        "tagName": "input",
        "id": "",
        "className": "field wide",
        "xpath": "/html[1]/body[1]/div[1]/form[1]/input[1]",
        "cssSelector": 'input.field.wide[type="text"][name="q"][role="searchbox"]',
        "attributes": [
            {"name": "type", "value": "text"},
            {"name": "name", "value": "q"},
            {"name": "role", "value": "searchbox"},
        ],
        "text": "",
        "role": "searchbox",
    }


def test_element_text_is_trimmed_and_truncated(make_document):
    doc = make_document(f"<p>   {'x' * 150}   </p>")
    assert get_element_info(doc.p)["text"] == "x" * 100
