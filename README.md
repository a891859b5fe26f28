# akoflow

The core of a workflow engine that runs scientific workflows as Kubernetes jobs.
The package holds:

- **Entities**: `Workflow` and `WorkflowActivity` (`akoflow.workflow`,
  `akoflow.workflow_activity`), `Runtime` (`akoflow.runtime_entity`),
  `K8sJob` (`akoflow.k8s_job`) and the manifest types for an NFS server in
  `akoflow.nfs_server` (`Deployment`, `Service`, `PersistentVolumeClaim`,
  `ClusterRole`, `ClusterRoleBinding`, `Role`, `RoleBinding`, `StorageClass`
  and their parts).
- **Persistence**: repositories for workflows, activities, storages, runtimes,
  logs and metrics, stored in SQLite through the standard library `sqlite3`
  module. Tables are described by the dataclass models in `akoflow.models`.
- **Dispatch**: a process-wide bounded work queue of `DataChannel` items,
  reached through `akoflow.channel.get_instance()`.

## Install

```
pip install .
```

To run the tests, install the test extra:

```
pip install .[test]
pytest
```

## Workflows

A workflow is a YAML document, passed base64-encoded:

```python
import base64
from akoflow.workflow import StorageMode, Workflow

document = """
name: wf-example
spec:
  runtime: k8s
  image: alpine:3
  namespace: akoflow
  storagePolicy:
    type: distributed
    storageClassName: standard
    storageSize: 1Gi
  activities:
    - name: a
      run: echo a
    - name: b
      run: echo b
      dependsOn: [a]
"""

wf = Workflow.from_base64(base64.b64encode(document.encode()).decode(), id=7)
wf.mode() is StorageMode.DISTRIBUTED   # True
wf.runtime_ids()                       # ["k8s"]
wf.persistent_volume_claim_name()      # "wf-pvc-7-nfs"
wf.storage_class_name_distributed()    # "akoflow-nfs-7"
```

A document that cannot be decoded or parsed gives an empty `Workflow`.
`Workflow.volumes()` splits each `local:remote` entry of `spec.volumes` into a
`WorkflowVolume`. A workflow with no `spec.runtime` takes the distinct runtimes
of its activities.

## Manifests

`K8sJob.to_dict()`, `to_yaml()` and `to_base64()` render a Job resource.
The NFS server types are rendered with `akoflow.nfs_server.to_manifest(obj)`
and `to_yaml(obj)`; optional keys such as `labels`, `protocol` or
`resourceNames` are left out when empty.

## Storing workflows and activities

```python
from akoflow.connection import Database
from akoflow.workflow_repository import WorkflowRepository
from akoflow.activity_repository import ActivityRepository, ActivityStatus

db = Database("storage/database.db")
workflows = WorkflowRepository(db)
activities = ActivityRepository(db)

workflow_id = workflows.create("akoflow", wf)
wf = workflows.find(workflow_id)
activities.create("akoflow", wf, wf.spec.activities)
stored = activities.get_by_workflow_id(workflow_id)
activities.update_status(stored[0].id, ActivityStatus.RUNNING)
```

`Database()` with no path uses `storage/database.db` two directories above the
working directory; the parent directory is created on connect.

- `WorkflowRepository.get_pending_workflows(namespace)` returns the workflows
  that are created or running; `list_all_workflows(page, per_page)` returns
  them newest first, all of them or one zero-based page.
- `ActivityRepository.create` also stores a pre-activity for every activity that
  declares `dependsOn`, and a dependency row for each dependency it can resolve.
  `update_status` stamps `started_at` when an activity runs and `finished_at`
  when it finishes.
- `find` and `get_by_name` methods raise `KeyError` when there is no such row.

`StorageRepository` keeps one row per activity with its volume claim, file
lists, disk specs and detach time. `LogsRepository` and `MetricsRepository`
append `LogEntry` and `MetricsRecord` rows.

## Runtimes

```python
from akoflow.runtime_repository import RuntimeRepository, RuntimeStatus

runtimes = RuntimeRepository(db)
runtimes.create_or_update("k8s", RuntimeStatus.NOT_READY, {"K8S_API_SERVER_HOST": "localhost"})
rt = runtimes.get_by_name("k8s")
rt.api_server_host()            # "localhost"
```

Runtime metadata keys are looked up as `<NAME>_<KEY>` in upper case.

## Work queue

```python
from akoflow.channel import DataChannel, get_instance

manager = get_instance()
manager.workflow_channel.put(DataChannel(namespace="akoflow", job=None, id=1))
item = manager.workflow_channel.get()
```

`get_instance()` always returns the same `Manager`; its queue holds up to 1000
items.

## What the package does not do

It has no HTTP API, no command-line tool, and no background loops that poll for
pending workflows, run activities on a cluster, collect metrics or remove
storages. It provides the entities, storage and queue that such parts would use.