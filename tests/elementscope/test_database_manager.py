# tests/elementscope/test_database_manager.py
import json
import sqlite3

import pandas as pd
import pytest

from elementscope.core.managers.database_manager import DatabaseManager
from elementscope.core.services.dataframe_service import DataFrameService
from elementscope.core.utils.path_utils import PathUtils
from relay.managers.element_history_manager import ElementHistoryManager


@pytest.fixture
def dm(tmp_path) -> DatabaseManager:
    m = DatabaseManager(tmp_path / "db" / "elements.db")
    m.init_schema()
    yield m
    m.close()


@pytest.fixture
def filled_dm(dm):
    history = ElementHistoryManager(dm)
    for n in range(1, 4):
        history.save_element({
            "tagName": "td",
            "className": "cell",
            "url": "https://example.com/table",
            "xpath": f"/html[1]/body[1]/table[1]/tr[1]/td[{n}]",
            "cssSelector": "td.cell",
            "attributes": [{"name": "data-id", "value": str(n)}, {"name": "headers", "value": "h1"}],
            "text": f"cell {n}",
        })
    return dm


def test_schema_and_row_factory(dm):
    assert dm.db_path.parent.is_dir()
    row_id = dm.execute_insert("INSERT INTO elements (tagName, timestamp) VALUES (?, ?)", ("div", "now"))
    assert row_id == 1

    row = dm.fetch_one("SELECT * FROM elements WHERE id = ?", (row_id,))
    assert isinstance(row, sqlite3.Row)
    assert row["tagName"] == "div"


def test_init_schema_is_idempotent(dm):
    dm.init_schema()
    assert dm.fetch_all("SELECT * FROM elements") == []


def test_failed_statements(dm):
    assert dm.execute_insert("INSERT INTO missing_table (x) VALUES (?)", (1,)) == -1
    assert dm.fetch_all("SELECT * FROM missing_table") == []
    assert dm.fetch_one("SELECT * FROM missing_table") is None
    with pytest.raises(sqlite3.Error):
        dm.execute_query("DELETE FROM missing_table")


def test_connection_reopens_after_close(dm):
    dm.execute_insert("INSERT INTO elements (tagName) VALUES (?)", ("p",))
    dm.close()
    assert len(dm.fetch_all("SELECT * FROM elements")) == 1


def test_relative_db_path_lives_in_cache_root(tmp_path, monkeypatch):
    monkeypatch.setattr(PathUtils, "get_cache_root", lambda: tmp_path / "cache")
    assert PathUtils.resolve_db_path("history.db") == tmp_path / "cache" / "history.db"
    assert PathUtils.resolve_db_path(None) == tmp_path / "cache" / "elements.db"
    assert PathUtils.resolve_db_path(str(tmp_path / "abs.db")) == tmp_path / "abs.db"


def test_load_history_dataframe(filled_dm):
    df = DataFrameService(filled_dm).load_history()
    assert isinstance(df, pd.DataFrame)
    assert list(df["elementText"]) == ["cell 3", "cell 2", "cell 1"]
    assert len(DataFrameService(filled_dm).load_history(limit=2)) == 2


def test_export_history_csv(filled_dm, tmp_path):
    output = tmp_path / "out" / "history.csv"
    count = DataFrameService(filled_dm).export_history(output)

    assert count == 3
    df = pd.read_csv(output)
    assert list(df.columns)[:3] == ["id", "timestamp", "tagName"]
    assert "fullData" not in df.columns
    assert df.loc[0, "attributes"] == "data-id=3; headers=h1"


def test_export_history_json(filled_dm, tmp_path):
    output = tmp_path / "history.json"
    assert DataFrameService(filled_dm).export_history(output, limit=1) == 1

    records = json.loads(output.read_text())
    assert len(records) == 1
    assert records[0]["elementText"] == "cell 3"


def test_export_empty_history(dm, tmp_path):
    output = tmp_path / "empty.csv"
    assert DataFrameService(dm).export_history(output) == 0
    assert not output.exists()


def test_home_env_moves_cache_root(tmp_path, monkeypatch):
    monkeypatch.setenv("ELEMENTSCOPE_HOME", str(tmp_path / "home"))
    assert PathUtils.get_cache_root() == tmp_path / "home"
    assert PathUtils.resolve_db_path("x.db") == tmp_path / "home" / "x.db"


def test_transaction_rolls_back_on_error(dm):
    with pytest.raises(RuntimeError):
        with dm.transaction() as conn:
            conn.execute("BEGIN")
            conn.execute("INSERT INTO elements (tagName) VALUES (?)", ("div",))
            raise RuntimeError("abort")
    assert dm.fetch_all("SELECT * FROM elements") == []
