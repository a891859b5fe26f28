"""Kubernetes resources that make up the shared NFS server of a workflow."""

from __future__ import annotations

from dataclasses import MISSING, dataclass, field, fields, is_dataclass
from typing import Any, Optional

import yaml


def _field(key: str, *, omitempty: bool = False, default: Any = MISSING, default_factory: Any = MISSING) -> Any:
    metadata = {"key": key, "omitempty": omitempty}
    if default_factory is not MISSING:
        return field(default_factory=default_factory, metadata=metadata)
    return field(default="" if default is MISSING else default, metadata=metadata)


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    if isinstance(value, (int, float)):
        return value == 0
    return False


def _convert(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return to_manifest(value)
    if isinstance(value, dict):
        return {key: _convert(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert(item) for item in value]
    return value


def to_manifest(obj: Any) -> dict[str, Any]:
    """Return the manifest mapping of a resource, dropping empty optional keys."""
    if not is_dataclass(obj) or isinstance(obj, type):
        raise TypeError(f"{obj!r} is not a resource instance")
    result: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if f.metadata.get("omitempty") and _is_empty(value):
            continue
        result[f.metadata.get("key", f.name)] = _convert(value)
    return result


def to_yaml(obj: Any) -> str:
    """Render a resource as a YAML document."""
    return yaml.safe_dump(to_manifest(obj), sort_keys=False)


@dataclass
class Metadata:
    namespace: str = _field("namespace")
    name: str = _field("name")
    labels: dict[str, str] = _field("labels", omitempty=True, default_factory=dict)


@dataclass
class ServiceAccount:
    api_version: str = _field("apiVersion")
    kind: str = _field("kind")
    metadata: Metadata = _field("metadata", default_factory=Metadata)


@dataclass
class ServicePort:
    name: str = _field("name")
    port: int = _field("port", default=0)
    protocol: str = _field("protocol", omitempty=True)


@dataclass
class ServiceSpec:
    ports: list[ServicePort] = _field("ports", default_factory=list)
    selector: dict[str, str] = _field("selector", default_factory=dict)


@dataclass
class Service:
    api_version: str = _field("apiVersion")
    kind: str = _field("kind")
    metadata: Metadata = _field("metadata", default_factory=Metadata)
    spec: ServiceSpec = _field("spec", default_factory=ServiceSpec)


@dataclass
class ResourceRequests:
    storage: str = _field("storage")


@dataclass
class Resources:
    requests: ResourceRequests = _field("requests", default_factory=ResourceRequests)


@dataclass
class PersistentVolumeClaimSpec:
    access_modes: list[str] = _field("accessModes", default_factory=list)
    resources: Resources = _field("resources", default_factory=Resources)
    storage_class_name: str = _field("storageClassName")


@dataclass
class PersistentVolumeClaim:
    api_version: str = _field("apiVersion")
    kind: str = _field("kind")
    metadata: Metadata = _field("metadata", default_factory=Metadata)
    spec: PersistentVolumeClaimSpec = _field("spec", default_factory=PersistentVolumeClaimSpec)


@dataclass
class DeploymentSelector:
    match_labels: dict[str, str] = _field("matchLabels", default_factory=dict)


@dataclass
class DeploymentStrategy:
    type: str = _field("type")


@dataclass
class ContainerPort:
    name: str = _field("name")
    container_port: int = _field("containerPort", default=0)
    protocol: str = _field("protocol", omitempty=True)


@dataclass
class Capabilities:
    add: list[str] = _field("add", default_factory=list)


@dataclass
class SecurityContext:
    capabilities: Capabilities = _field("capabilities", default_factory=Capabilities)


@dataclass
class ObjectFieldSelector:
    field_path: str = _field("fieldPath")


@dataclass
class EnvVarSource:
    field_ref: Optional[ObjectFieldSelector] = _field("fieldRef", default=None)


@dataclass
class EnvVar:
    name: str = _field("name")
    value: str = _field("value", omitempty=True)
    value_from: Optional[EnvVarSource] = _field("valueFrom", omitempty=True, default=None)


@dataclass
class VolumeMount:
    name: str = _field("name")
    mount_path: str = _field("mountPath")


@dataclass
class Volume:
    name: str = _field("name")


@dataclass
class Container:
    name: str = _field("name")
    image: str = _field("image")
    ports: list[ContainerPort] = _field("ports", default_factory=list)
    security_context: SecurityContext = _field("securityContext", default_factory=SecurityContext)
    args: list[str] = _field("args", default_factory=list)
    env: list[EnvVar] = _field("env", default_factory=list)
    image_pull_policy: str = _field("imagePullPolicy")
    volume_mounts: list[VolumeMount] = _field("volumeMounts", default_factory=list)


@dataclass
class PodSpec:
    service_account_name: str = _field("serviceAccountName")
    containers: list[Container] = _field("containers", default_factory=list)
    volumes: list[Volume] = _field("volumes", default_factory=list)


@dataclass
class PodTemplate:
    metadata: Metadata = _field("metadata", default_factory=Metadata)
    spec: PodSpec = _field("spec", default_factory=PodSpec)


@dataclass
class DeploymentSpec:
    selector: DeploymentSelector = _field("selector", default_factory=DeploymentSelector)
    replicas: int = _field("replicas", default=0)
    strategy: DeploymentStrategy = _field("strategy", default_factory=DeploymentStrategy)
    template: PodTemplate = _field("template", default_factory=PodTemplate)


@dataclass
class Deployment:
    api_version: str = _field("apiVersion")
    kind: str = _field("kind")
    metadata: Metadata = _field("metadata", default_factory=Metadata)
    spec: DeploymentSpec = _field("spec", default_factory=DeploymentSpec)


@dataclass
class PolicyRule:
    api_groups: list[str] = _field("apiGroups", default_factory=list)
    resources: list[str] = _field("resources", default_factory=list)
    verbs: list[str] = _field("verbs", default_factory=list)
    resource_names: list[str] = _field("resourceNames", omitempty=True, default_factory=list)


@dataclass
class ClusterRole:
    api_version: str = _field("apiVersion")
    kind: str = _field("kind")
    metadata: Metadata = _field("metadata", default_factory=Metadata)
    rules: list[PolicyRule] = _field("rules", default_factory=list)


@dataclass
class Subject:
    kind: str = _field("kind")
    name: str = _field("name")
    namespace: str = _field("namespace")


@dataclass
class RoleRef:
    kind: str = _field("kind")
    name: str = _field("name")
    api_group: str = _field("apiGroup")


@dataclass
class ClusterRoleBinding:
    api_version: str = _field("apiVersion")
    kind: str = _field("kind")
    metadata: Metadata = _field("metadata", default_factory=Metadata)
    subjects: list[Subject] = _field("subjects", default_factory=list)
    role_ref: RoleRef = _field("roleRef", default_factory=RoleRef)


@dataclass
class Role:
    api_version: str = _field("apiVersion")
    kind: str = _field("kind")
    metadata: Metadata = _field("metadata", default_factory=Metadata)
    rules: list[PolicyRule] = _field("rules", default_factory=list)


@dataclass
class RoleBinding:
    api_version: str = _field("apiVersion")
    kind: str = _field("kind")
    metadata: Metadata = _field("metadata", default_factory=Metadata)
    subjects: list[Subject] = _field("subjects", default_factory=list)
    role_ref: RoleRef = _field("roleRef", default_factory=RoleRef)


@dataclass
class StorageClass:
    api_version: str = _field("apiVersion")
    kind: str = _field("kind")
    metadata: Metadata = _field("metadata", default_factory=Metadata)
    provisioner: str = _field("provisioner")
    mount_options: list[str] = _field("mountOptions", default_factory=list)