from contextlib import closing

import pytest

from akoflow.connection import Database
from akoflow.logs_repository import LogEntry, LogsRepository


@pytest.fixture
def database(tmp_path):
    return Database(tmp_path / "logs.db")


def _rows(database):
    with closing(database.connect()) as connection:
        return connection.execute("SELECT id, activity_id, logs, created_at FROM logs ORDER BY id").fetchall()


def test_create_stores_entry(database):
    repository = LogsRepository(database)
    repository.create(LogEntry(activity_id=7, logs="hello"))
    rows = _rows(database)
    assert len(rows) == 1
    assert rows[0][1:3] == (7, "hello")


def test_created_at_is_filled_by_database(database):
    repository = LogsRepository(database)
    repository.create(LogEntry(activity_id=1, logs="line"))
    created_at = _rows(database)[0][3]
    assert isinstance(created_at, str) and len(created_at) > 0


def test_ids_increase(database):
    repository = LogsRepository(database)
    repository.create(LogEntry(activity_id=1, logs="a"))
    repository.create(LogEntry(activity_id=1, logs="b"))
    rows = _rows(database)
    assert [row[2] for row in rows] == ["a", "b"]
    assert rows[0][0] < rows[1][0]


def test_repository_reopens_existing_table(database):
    LogsRepository(database).create(LogEntry(activity_id=2, logs="first"))
    LogsRepository(database).create(LogEntry(activity_id=3, logs="second"))
    assert [row[1] for row in _rows(database)] == [2, 3]