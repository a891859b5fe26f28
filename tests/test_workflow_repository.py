import pytest

from akoflow.connection import Database
from akoflow.workflow import Workflow, WorkflowSpec
from akoflow.workflow_activity import WorkflowActivity
from akoflow.workflow_repository import WorkflowRepository, WorkflowStatus


@pytest.fixture
def repository(tmp_path):
    return WorkflowRepository(Database(tmp_path / "storage" / "database.db"))


def _workflow(name):
    return Workflow(
        name=name,
        spec=WorkflowSpec(
            runtime="k8s",
            image="alpine",
            namespace="akoflow",
            activities=[WorkflowActivity(name="step-a", run="echo a")],
        ),
    )


def test_status_values():
    assert [WorkflowStatus(value).name for value in range(3)] == [
        "CREATED",
        "RUNNING",
        "FINISHED",
    ]


def test_create_and_find_round_trip(repository):
    workflow_id = repository.create("akoflow", _workflow("wf-one"))
    found = repository.find(workflow_id)
    assert found.id == workflow_id
    assert found.name == "wf-one"
    assert found.status == WorkflowStatus.CREATED
    assert found.spec.runtime == "k8s"
    assert found.spec.image == "alpine"
    assert found.namespace == "akoflow"
    assert [a.name for a in found.spec.activities] == ["step-a"]
    assert found.spec.activities[0].run == "echo a"


def test_create_returns_increasing_ids(repository):
    first = repository.create("akoflow", _workflow("a"))
    second = repository.create("akoflow", _workflow("b"))
    assert second > first


def test_find_missing_raises(repository):
    with pytest.raises(KeyError):
        repository.find(42)


def test_update_status(repository):
    workflow_id = repository.create("akoflow", _workflow("wf"))
    repository.update_status(workflow_id, WorkflowStatus.RUNNING)
    assert repository.find(workflow_id).status == WorkflowStatus.RUNNING


def test_pending_workflows_filter(repository):
    created = repository.create("akoflow", _workflow("created"))
    running = repository.create("akoflow", _workflow("running"))
    finished = repository.create("akoflow", _workflow("finished"))
    repository.create("other", _workflow("elsewhere"))
    repository.update_status(running, WorkflowStatus.RUNNING)
    repository.update_status(finished, WorkflowStatus.FINISHED)

    pending = repository.get_pending_workflows("akoflow")
    assert [w.id for w in pending] == [created, running]
    assert [w.status for w in pending] == [WorkflowStatus.CREATED, WorkflowStatus.RUNNING]
    assert [w.name for w in repository.get_pending_workflows("other")] == ["elsewhere"]


def test_list_all_newest_first(repository):
    ids = [repository.create("akoflow", _workflow(f"wf-{n}")) for n in range(3)]
    listed = repository.list_all_workflows()
    assert [w.id for w in listed] == list(reversed(ids))
    assert [w.name for w in listed] == ["wf-2", "wf-1", "wf-0"]


def test_list_all_pagination(repository):
    ids = [repository.create("akoflow", _workflow(f"wf-{n}")) for n in range(5)]
    newest_first = list(reversed(ids))
    assert [w.id for w in repository.list_all_workflows(page=0, per_page=2)] == newest_first[0:2]
    assert [w.id for w in repository.list_all_workflows(page=1, per_page=2)] == newest_first[2:4]
    assert [w.id for w in repository.list_all_workflows(page=2, per_page=2)] == newest_first[4:]
    assert repository.list_all_workflows(page=3, per_page=2) == []


def test_list_all_requires_both_page_arguments(repository):
    with pytest.raises(ValueError):
        repository.list_all_workflows(page=1)
    with pytest.raises(ValueError):
        repository.list_all_workflows(per_page=1)


def test_list_all_empty(repository):
    assert repository.list_all_workflows() == []