from contextlib import closing

import pytest

from akoflow.connection import Database
from akoflow.runtime_entity import Runtime
from akoflow.runtime_repository import RuntimeRepository, RuntimeStatus


@pytest.fixture
def database(tmp_path):
    return Database(tmp_path / "runtimes.db")


@pytest.fixture
def repository(database):
    return RuntimeRepository(database)


def test_status_values():
    assert RuntimeStatus(1) is RuntimeStatus.READY
    assert RuntimeStatus(0) is RuntimeStatus.NOT_READY


def test_create_then_get_by_name(repository):
    metadata = {"K8S_API_SERVER_HOST": "https://localhost:6443", "K8S_API_SERVER_TOKEN": "token"}
    repository.create_or_update("k8s", RuntimeStatus.NOT_READY, metadata)
    runtime = repository.get_by_name("k8s")
    assert runtime.name == "k8s"
    assert runtime.status == RuntimeStatus.NOT_READY
    assert runtime.metadata == metadata
    assert runtime.api_server_host() == "https://localhost:6443"
    assert runtime.api_server_token() == "token"
    assert runtime.created_at and runtime.updated_at


def test_update_existing_keeps_single_row(repository):
    repository.create_or_update("k8s", RuntimeStatus.NOT_READY, {"A": "1"})
    repository.create_or_update("k8s", RuntimeStatus.READY, {"A": "2"})
    runtimes = repository.get_all()
    assert len(runtimes) == 1
    assert runtimes[0].status == RuntimeStatus.READY
    assert runtimes[0].metadata == {"A": "2"}


def test_none_metadata_stored_as_empty_object(repository, database):
    repository.create_or_update("local", RuntimeStatus.READY, None)
    with closing(database.connect()) as connection:
        (stored,) = connection.execute("SELECT metadata FROM runtimes WHERE name = 'local'").fetchone()
    assert stored == "{}"
    assert repository.get_by_name("local").metadata == {}


def test_metadata_stored_as_compact_sorted_json(repository, database):
    repository.create_or_update("r", RuntimeStatus.READY, {"B": "2", "A": "1"})
    with closing(database.connect()) as connection:
        (stored,) = connection.execute("SELECT metadata FROM runtimes WHERE name = 'r'").fetchone()
    assert stored == '{"A":"1","B":"2"}'


def test_get_all_lists_every_runtime(repository):
    repository.create_or_update("a", RuntimeStatus.READY, {})
    repository.create_or_update("b", RuntimeStatus.NOT_READY, {})
    assert sorted(runtime.name for runtime in repository.get_all()) == ["a", "b"]


def test_get_all_empty(repository):
    assert repository.get_all() == []


def test_get_by_name_missing_raises(repository):
    with pytest.raises(KeyError):
        repository.get_by_name("missing")


def test_update_status(repository):
    repository.create_or_update("k8s", RuntimeStatus.NOT_READY, {"X": "y"})
    repository.update_status(Runtime(name="k8s"), RuntimeStatus.READY)
    runtime = repository.get_by_name("k8s")
    assert runtime.status == RuntimeStatus.READY
    assert runtime.metadata == {"X": "y"}


def test_invalid_stored_metadata_raises(repository, database):
    with closing(database.connect()) as connection:
        connection.execute(
            "INSERT INTO runtimes (name, status, metadata) VALUES (?, ?, ?)", ("bad", 0, '{"A": 1}')
        )
    with pytest.raises(ValueError):
        repository.get_by_name("bad")