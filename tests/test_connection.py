import re
from contextlib import closing

import pytest

from akoflow.connection import Database, create_or_verify_table, default_database_path
from akoflow.models import (
    Activity,
    ActivityDependency,
    Logs,
    Metrics,
    PreActivity,
    Runtime,
    Storage,
    Workflow,
)


def test_default_path_is_two_levels_up(tmp_path, monkeypatch):
    work = tmp_path / "a" / "b"
    work.mkdir(parents=True)
    monkeypatch.chdir(work)
    path = default_database_path()
    assert path.resolve() == (tmp_path / "storage" / "database.db").resolve()


def test_database_uses_default_path(tmp_path, monkeypatch):
    work = tmp_path / "x" / "y"
    work.mkdir(parents=True)
    monkeypatch.chdir(work)
    assert Database().path.resolve() == default_database_path().resolve()


def test_connect_creates_directory(tmp_path):
    db = Database(tmp_path / "storage" / "database.db")
    with closing(db.connect()):
        pass
    assert (tmp_path / "storage").is_dir()
    assert (tmp_path / "storage" / "database.db").exists()


def test_create_table_is_cached_per_file(tmp_path):
    db = Database(tmp_path / "db.sqlite")
    with closing(db.connect()) as conn:
        assert create_or_verify_table(conn, Activity()) is True
        assert create_or_verify_table(conn, Activity()) is False
    with closing(db.connect()) as conn:
        assert create_or_verify_table(conn, Activity()) is False


def test_same_table_in_other_file_is_created(tmp_path):
    first = Database(tmp_path / "one.sqlite")
    second = Database(tmp_path / "two.sqlite")
    with closing(first.connect()) as conn:
        assert create_or_verify_table(conn, Workflow()) is True
    with closing(second.connect()) as conn:
        assert create_or_verify_table(conn, Workflow()) is True
        names = [row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")]
    assert "workflows" in names


def test_in_memory_is_never_cached():
    with closing(Database(":memory:").connect()) as conn:
        assert create_or_verify_table(conn, Logs()) is True
        assert create_or_verify_table(conn, Logs()) is True


@pytest.mark.parametrize(
    "model",
    [Activity(), ActivityDependency(), Logs(), Metrics(), PreActivity(), Runtime(), Storage(), Workflow()],
)
def test_table_columns_match_model(tmp_path, model):
    db = Database(tmp_path / "schema.sqlite")
    with closing(db.connect()) as conn:
        create_or_verify_table(conn, model)
        info = conn.execute(f"PRAGMA table_info({model.table_name()})").fetchall()
    assert [row[1] for row in info] == model.columns()


def test_autoincrement_id_is_primary_key(tmp_path):
    db = Database(tmp_path / "pk.sqlite")
    with closing(db.connect()) as conn:
        create_or_verify_table(conn, Activity())
        info = {row[1]: row for row in conn.execute("PRAGMA table_info(activities)")}
    assert info["id"][2] == "INTEGER"
    assert info["id"][5] == 1


def test_logs_defaults_and_autocommit(tmp_path):
    db = Database(tmp_path / "logs.sqlite")
    with closing(db.connect()) as conn:
        create_or_verify_table(conn, Logs())
        conn.execute("INSERT INTO logs (activity_id, logs) VALUES (?, ?)", (7, "started"))
    with closing(db.connect()) as conn:
        row = conn.execute("SELECT id, activity_id, logs, created_at FROM logs").fetchone()
    assert row[:3] == (1, 7, "started")
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", row[3])