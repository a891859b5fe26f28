"""Workflows submitted to the server."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import yaml

from akoflow.workflow_activity import (
    WorkflowActivity,
    _as_int,
    _as_str,
    _as_str_list,
    _decode_base64,
)


class StorageMode(str, Enum):
    DISTRIBUTED = "distributed"
    STANDALONE = "standalone"


@dataclass
class StoragePolicy:
    type: str = ""
    storage_class_name: str = ""
    storage_size: str = ""

    @classmethod
    def from_mapping(cls, data: Any) -> "StoragePolicy":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("storagePolicy must be a mapping")
        return cls(
            type=_as_str(data.get("type")),
            storage_class_name=_as_str(data.get("storageClassName")),
            storage_size=_as_str(data.get("storageSize")),
        )

    def to_yaml_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "storageClassName": self.storage_class_name,
            "storageSize": self.storage_size,
        }


@dataclass
class WorkflowSpec:
    runtime: str = ""
    image: str = ""
    storage_policy: StoragePolicy = field(default_factory=StoragePolicy)
    volumes: list[str] = field(default_factory=list)
    mount_path: str = ""
    activities: list[WorkflowActivity] = field(default_factory=list)
    namespace: str = ""

    @classmethod
    def from_mapping(cls, data: Any) -> "WorkflowSpec":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("spec must be a mapping")
        activities = data.get("activities") or []
        if not isinstance(activities, list):
            raise ValueError("activities must be a list")
        return cls(
            runtime=_as_str(data.get("runtime")),
            image=_as_str(data.get("image")),
            storage_policy=StoragePolicy.from_mapping(data.get("storagePolicy")),
            volumes=_as_str_list(data.get("volumes")) or [],
            mount_path=_as_str(data.get("mountPath")),
            activities=[WorkflowActivity.from_mapping(item) for item in activities],
            namespace=_as_str(data.get("namespace")),
        )

    def to_yaml_dict(self) -> dict[str, Any]:
        return {
            "runtime": self.runtime,
            "image": self.image,
            "storagePolicy": self.storage_policy.to_yaml_dict(),
            "volumes": list(self.volumes),
            "mountPath": self.mount_path,
            "activities": [activity.to_yaml_dict() for activity in self.activities],
            "namespace": self.namespace,
        }


@dataclass(frozen=True)
class WorkflowVolume:
    """A ``local:remote`` volume binding."""

    local_path: str
    remote_path: str


@dataclass
class WorkflowDatabase:
    """A row of the workflows table."""

    id: int = 0
    namespace: str = ""
    runtime: str = ""
    name: str = ""
    raw_workflow: str = ""
    status: int = 0


@dataclass
class Workflow:
    """A workflow document together with its stored id and status."""

    name: str = ""
    spec: WorkflowSpec = field(default_factory=WorkflowSpec)
    id: int = 0
    status: int = 0

    @classmethod
    def from_base64(
        cls,
        workflow_base64: str,
        id: Optional[int] = None,
        status: Optional[int] = None,
    ) -> "Workflow":
        """Decode a base64 YAML workflow; an unparsable document yields an empty one."""
        try:
            text = _decode_base64(workflow_base64)
        except ValueError:
            text = ""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError:
            return cls()
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return cls()
        try:
            workflow = cls(
                name=_as_str(data.get("name")),
                spec=WorkflowSpec.from_mapping(data.get("spec")),
                id=_as_int(data.get("id")),
                status=_as_int(data.get("status")),
            )
        except (ValueError, TypeError):
            return cls()
        if id is not None:
            workflow.id = id
        if status is not None:
            workflow.status = status
        return workflow

    def to_yaml_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "spec": self.spec.to_yaml_dict(),
            "id": self.id,
            "status": self.status,
        }

    def to_base64(self) -> str:
        text = yaml.safe_dump(self.to_yaml_dict(), sort_keys=False)
        return base64.b64encode(text.encode("utf-8")).decode("ascii")

    def validate(self) -> bool:
        return True

    @property
    def namespace(self) -> str:
        return self.spec.namespace

    @property
    def mount_path(self) -> str:
        return self.spec.mount_path

    @property
    def storage_class_name(self) -> str:
        return self.spec.storage_policy.storage_class_name

    @property
    def storage_size(self) -> str:
        return self.spec.storage_policy.storage_size

    @property
    def storage_policy_type(self) -> str:
        return self.spec.storage_policy.type

    def is_storage_policy_distributed(self) -> bool:
        return self.spec.storage_policy.type == StorageMode.DISTRIBUTED.value

    def is_storage_policy_standalone(self) -> bool:
        return self.spec.storage_policy.type in (StorageMode.STANDALONE.value, "")

    def mode(self) -> Optional[StorageMode]:
        """Return the storage mode, or None for an unknown policy type."""
        if self.is_storage_policy_distributed():
            return StorageMode.DISTRIBUTED
        if self.is_storage_policy_standalone():
            return StorageMode.STANDALONE
        return None

    def runtime_ids(self) -> list[str]:
        """Return the workflow runtime, or the distinct runtimes of its activities."""
        if self.spec.runtime:
            return [self.spec.runtime]
        return list(dict.fromkeys(a.runtime for a in self.spec.activities if a.runtime))

    def volume_name_distributed(self) -> str:
        return f"wf-volume-{self.id}"

    def storage_class_name_distributed(self) -> str:
        return f"akoflow-nfs-{self.id}"

    def persistent_volume_claim_name(self) -> str:
        return f"wf-pvc-{self.id}-nfs"

    def volumes(self) -> list[WorkflowVolume]:
        """Return the declared ``local:remote`` volumes."""
        result = []
        for volume in self.spec.volumes:
            parts = volume.split(":")
            if len(parts) < 2:
                raise ValueError(f"volume {volume!r} is not of the form local:remote")
            result.append(WorkflowVolume(local_path=parts[0], remote_path=parts[1]))
        return result


def database_to_workflow(record: WorkflowDatabase) -> Workflow:
    """Rebuild a workflow from its stored row."""
    return Workflow.from_base64(record.raw_workflow, id=record.id, status=record.status)