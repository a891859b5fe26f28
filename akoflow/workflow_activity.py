"""Workflow activities and their database records."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Optional

import yaml


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    return int(value)


def _as_bool(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise ValueError(f"expected a boolean, got {value!r}")


def _as_str_list(value: Any) -> Optional[list[str]]:
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValueError(f"expected a list, got {value!r}")
    return [_as_str(item) for item in value]


def _decode_base64(text: str) -> str:
    cleaned = text.replace("\r", "").replace("\n", "")
    return base64.b64decode(cleaned, validate=True).decode("utf-8")


@dataclass
class WorkflowActivity:
    """One step of a workflow, as declared in the workflow document."""

    id: int = 0
    workflow_id: int = 0
    status: int = 0
    proc_id: str = ""
    name: str = ""
    run: str = ""
    image: str = ""
    runtime: str = ""
    memory_limit: str = ""
    cpu_limit: str = ""
    depends_on: Optional[list[str]] = None
    node_selector: str = ""
    keep_disk: bool = False
    created_at: str = ""
    started_at: str = ""
    finished_at: str = ""

    @classmethod
    def from_mapping(cls, data: Any) -> "WorkflowActivity":
        """Build an activity from a parsed YAML mapping."""
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("activity document must be a mapping")
        return cls(
            id=_as_int(data.get("id")),
            workflow_id=_as_int(data.get("workflowid")),
            status=_as_int(data.get("status")),
            proc_id=_as_str(data.get("procId")),
            name=_as_str(data.get("name")),
            run=_as_str(data.get("run")),
            image=_as_str(data.get("image")),
            runtime=_as_str(data.get("runtime")),
            memory_limit=_as_str(data.get("memoryLimit")),
            cpu_limit=_as_str(data.get("cpuLimit")),
            depends_on=_as_str_list(data.get("dependsOn")),
            node_selector=_as_str(data.get("nodeSelector")),
            keep_disk=_as_bool(data.get("keepDisk")),
            created_at=_as_str(data.get("createdAt")),
            started_at=_as_str(data.get("startedAt")),
            finished_at=_as_str(data.get("finishedAt")),
        )

    @classmethod
    def from_yaml(cls, text: str) -> "WorkflowActivity":
        """Parse an activity from YAML text."""
        return cls.from_mapping(yaml.safe_load(text))

    def to_yaml_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "workflowid": self.workflow_id,
            "status": self.status,
            "procId": self.proc_id,
            "name": self.name,
            "run": self.run,
            "image": self.image,
            "runtime": self.runtime,
            "memoryLimit": self.memory_limit,
            "cpuLimit": self.cpu_limit,
            "dependsOn": list(self.depends_on or []),
            "nodeSelector": self.node_selector,
            "keepDisk": self.keep_disk,
            "createdAt": self.created_at,
            "startedAt": self.started_at,
            "finishedAt": self.finished_at,
        }

    def to_base64(self) -> str:
        text = yaml.safe_dump(self.to_yaml_dict(), sort_keys=False)
        return base64.b64encode(text.encode("utf-8")).decode("ascii")

    def preactivity_name(self) -> str:
        return f"preactivity-{self.id}"

    def job_name(self) -> str:
        return f"activity-{self.id}-{self.name}"

    def volume_name(self) -> str:
        return f"pvc-{self.id}-wfa"

    def node_selector_map(self) -> Optional[dict[str, str]]:
        """Return the ``key=value`` node selector as a mapping, or None."""
        if not self.node_selector:
            return None
        parts = self.node_selector.split("=")
        if len(parts) < 2:
            raise ValueError(f"node selector {self.node_selector!r} is not of the form key=value")
        return {parts[0]: parts[1]}

    def has_dependencies(self) -> bool:
        return bool(self.depends_on)

    def runtime_id(self) -> str:
        if not self.runtime:
            raise ValueError("Runtime not set")
        return self.runtime


@dataclass
class WorkflowActivityDatabase:
    """A row of the activities table."""

    id: int = 0
    workflow_id: int = 0
    namespace: str = ""
    name: str = ""
    image: str = ""
    runtime: str = ""
    resource_k8s_base64: str = ""
    status: int = 0
    proc_id: Optional[str] = None
    depend_on_activity: Optional[int] = None
    created_at: Optional[str] = None
    started_at: Optional[str] = None
    finished_at: Optional[str] = None


@dataclass
class WorkflowActivityDependencyDatabase:
    """A row of the activity dependencies table."""

    id: int = 0
    workflow_id: int = 0
    activity_id: int = 0
    depends_on_id: int = 0


@dataclass
class WorkflowPreActivityDatabase:
    """A row of the pre-activities table."""

    id: int = 0
    activity_id: int = 0
    workflow_id: int = 0
    namespace: str = ""
    name: str = ""
    resource_k8s_base64: Optional[str] = None
    status: int = 0
    log: Optional[str] = None

    def preactivity_name(self) -> str:
        return f"preactivity-{self.activity_id}"


def database_to_workflow_activity(record: WorkflowActivityDatabase) -> WorkflowActivity:
    """Combine a database row with the activity document it stores.

    An undecodable document yields an empty activity.
    """
    try:
        declared = WorkflowActivity.from_yaml(_decode_base64(record.resource_k8s_base64))
    except (ValueError, TypeError, yaml.YAMLError):
        return WorkflowActivity()

    return WorkflowActivity(
        id=record.id,
        workflow_id=record.workflow_id,
        status=record.status,
        proc_id=record.proc_id or "",
        name=record.name,
        run=declared.run,
        image=record.image,
        runtime=record.runtime or declared.runtime,
        memory_limit=declared.memory_limit,
        cpu_limit=declared.cpu_limit,
        depends_on=declared.depends_on,
        node_selector=declared.node_selector,
        keep_disk=declared.keep_disk,
        created_at=record.created_at or "",
        started_at=record.started_at or "",
        finished_at=record.finished_at or "",
    )