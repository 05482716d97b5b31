# tests/elementscope/test_cli.py
import json
from unittest.mock import patch

import pytest

from elementscope.app import main
from elementscope.core.command_registry import COMMAND_HELP_TEXTS, CommandRegistry, register_all_commands
from elementscope.core.managers.database_manager import DatabaseManager
from relay.managers.element_history_manager import ElementHistoryManager

PAGE = """<!DOCTYPE html>
<html><head><title>Shop</title></head>
<body>
  <ul class="products">
    <li class="product"><a href="/p/1">One</a></li>
    <li class="product"><a href="/p/2">Two</a></li>
    <li class="product"><a href="/p/3">Three</a></li>
  </ul>
</body></html>
"""


@pytest.fixture
def page_file(tmp_path):
    path = tmp_path / "shop.html"
    path.write_text(PAGE, encoding="utf-8")
    return path


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "history.db"
    dm = DatabaseManager(path)
    history = ElementHistoryManager(dm)
    for n in range(1, 4):
        history.save_element({"tagName": "li", "id": f"p{n}", "cssSelector": f"li#p{n}", "text": f"Product {n}"})
    dm.close()
    return path


def test_all_handlers_are_registered():
    register_all_commands()
    assert {"serve", "inspect", "history"} <= set(CommandRegistry)
    assert {"serve", "inspect", "history"} <= set(COMMAND_HELP_TEXTS)


def test_help_and_unknown_command(capsys):
    assert main(["help"]) == 0
    out = capsys.readouterr().out
    assert "Usage: elementscope" in out
    assert "history list" in out

    assert main(["frobnicate"]) == 1
    assert "Unknown command 'frobnicate'" in capsys.readouterr().out


def test_inspect_prints_payload(page_file, capsys):
    assert main(["inspect", str(page_file), "--css", "li.product:nth-of-type(2)", "--url", "https://shop.test/"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["tagName"] == "li"
    assert payload["text"] == "Two"
    assert payload["url"] == "https://shop.test/"
    assert payload["xpath"] == "/html[1]/body[1]/ul[1]/li[2]"
    assert payload["analysis"]["structure"]["similarSiblingCount"] == 2
    assert payload["analysis"]["structure"]["isRepeating"] is True


def test_inspect_by_xpath(page_file, capsys):
    assert main(["inspect", str(page_file), "--xpath", "/html[1]/body[1]/ul[1]/li[3]/a[1]"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["tagName"] == "a"
    assert payload["role"] == "link"
    assert payload["analysis"]["patterns"]["interactionPattern"] == "clickable"
    assert payload["url"] == page_file.resolve().as_uri()


def test_inspect_all_matches(page_file, capsys):
    assert main(["inspect", str(page_file), "--css", "li.product", "--all"]) == 0

    payloads = json.loads(capsys.readouterr().out)
    assert [p["text"] for p in payloads] == ["One", "Two", "Three"]


def test_inspect_without_match(page_file, capsys):
    assert main(["inspect", str(page_file), "--css", "table"]) == 1
    assert "No element matches" in capsys.readouterr().out


def test_inspect_missing_file(tmp_path, capsys):
    assert main(["inspect", str(tmp_path / "missing.html"), "--css", "p"]) == 1
    assert "could not read" in capsys.readouterr().out


def test_inspect_send_failure_is_reported(page_file):
    with patch("elementscope.core.handlers.inspect_handler._send_payloads", return_value=None) as send:
        with patch("elementscope.core.handlers.inspect_handler.asyncio.run", return_value=0) as run:
            assert main(["inspect", str(page_file), "--css", "li", "--send", "ws://127.0.0.1:9"]) == 1
    assert send.call_args.args[0] == "ws://127.0.0.1:9"
    assert run.call_count == 1


def test_history_list(db_path, capsys):
    assert main(["history", "list", "--db-path", str(db_path), "--limit", "2"]) == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 2
    assert "<li> #p3" in lines[0]
    assert "li#p2" in lines[1]


def test_history_export(db_path, tmp_path, capsys):
    output = tmp_path / "export.json"
    assert main(["history", "export", "-o", str(output), "--db-path", str(db_path)]) == 0

    summary = json.loads(capsys.readouterr().out)
    assert summary["exported"] == 3
    assert [r["elementText"] for r in json.loads(output.read_text())] == ["Product 3", "Product 2", "Product 1"]


def test_history_usage(capsys):
    assert main(["history"]) == 1
    assert "Usage:" in capsys.readouterr().out


def test_serve_uses_settings(tmp_path):
    with patch("elementscope.core.handlers.serve_handler.run_server") as run_server:
        assert main(["serve", "--port", "3999", "--db-path", str(tmp_path / "s.db")]) == 0

    host, port, db = run_server.call_args.args
    assert host == "127.0.0.1"
    assert port == 3999
    assert db == tmp_path / "s.db"


def test_inspect_refuses_restricted_url(page_file, capsys):
    assert main(["inspect", str(page_file), "--css", "li", "--url", "chrome://settings"]) == 1

    out = capsys.readouterr().out
    assert "Cannot inspect restricted page: chrome://settings" in out
    assert "Traceback" not in out
