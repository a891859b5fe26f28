"""Kubernetes Job manifests built for workflow activities."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Optional

import yaml


@dataclass
class K8sJobMetadata:
    name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name}


@dataclass
class K8sJobEnv:
    name: str = ""
    value: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass
class K8sJobResourcesLimits:
    cpu: str = ""
    memory: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"cpu": self.cpu, "memory": self.memory}


@dataclass
class K8sJobResources:
    limits: K8sJobResourcesLimits = field(default_factory=K8sJobResourcesLimits)

    def to_dict(self) -> dict[str, Any]:
        return {"limits": self.limits.to_dict()}


@dataclass
class K8sJobVolumeMount:
    name: str = ""
    mount_path: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "mountPath": self.mount_path}


@dataclass
class K8sJobVolume:
    """A pod volume backed by a persistent volume claim."""

    name: str = ""
    claim_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "persistentVolumeClaim": {"claimName": self.claim_name}}


@dataclass
class K8sJobContainer:
    name: str = ""
    image: str = ""
    command: list[str] = field(default_factory=list)
    volume_mounts: list[K8sJobVolumeMount] = field(default_factory=list)
    resources: K8sJobResources = field(default_factory=K8sJobResources)
    env: list[K8sJobEnv] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "image": self.image,
            "command": list(self.command),
            "volumeMounts": [mount.to_dict() for mount in self.volume_mounts],
            "resources": self.resources.to_dict(),
            "env": [env.to_dict() for env in self.env],
        }


@dataclass
class K8sJobSpecTemplate:
    containers: list[K8sJobContainer] = field(default_factory=list)
    restart_policy: str = ""
    backoff_limit: int = 0
    volumes: list[K8sJobVolume] = field(default_factory=list)
    node_selector: Optional[dict[str, str]] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "containers": [container.to_dict() for container in self.containers],
            "restartPolicy": self.restart_policy,
            "backoffLimit": self.backoff_limit,
            "volumes": [volume.to_dict() for volume in self.volumes],
            "nodeSelector": dict(self.node_selector or {}),
        }


@dataclass
class K8sJobTemplate:
    spec: K8sJobSpecTemplate = field(default_factory=K8sJobSpecTemplate)

    def to_dict(self) -> dict[str, Any]:
        return {"spec": self.spec.to_dict()}


@dataclass
class K8sJobSpec:
    template: K8sJobTemplate = field(default_factory=K8sJobTemplate)
    backoff_limit: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"template": self.template.to_dict(), "backoffLimit": self.backoff_limit}


@dataclass
class K8sJob:
    """A Kubernetes Job resource."""

    api_version: str = ""
    kind: str = ""
    metadata: K8sJobMetadata = field(default_factory=K8sJobMetadata)
    spec: K8sJobSpec = field(default_factory=K8sJobSpec)

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
        }

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False)

    def to_base64(self) -> str:
        return base64.b64encode(self.to_yaml().encode("utf-8")).decode("ascii")