"""Table models persisted in the server database."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from akoflow.database import (
    db_field,
    get_clausule_primary_key,
    get_column_type,
    get_columns,
    get_primary_key,
)


class Model:
    """Base for dataclass models describing a database table."""

    TABLE_NAME: ClassVar[str] = ""

    def table_name(self) -> str:
        return self.TABLE_NAME

    def columns(self) -> list[str]:
        return get_columns(self)

    def primary_key(self) -> str:
        return get_primary_key(self)

    def primary_key_clause(self) -> str:
        return get_clausule_primary_key(self)

    def column_type(self, column: str) -> str:
        return get_column_type(self, column)


_AUTO_ID = "INTEGER PRIMARY KEY AUTOINCREMENT"
_DEFAULT_NOW = "DEFAULT CURRENT_TIMESTAMP"


@dataclass
class ActivityDependency(Model):
    TABLE_NAME = "activities_dependencies"

    id: int = db_field("id", _AUTO_ID, 0)
    workflow_id: int = db_field("workflow_id", default=0)
    activity_id: int = db_field("activity_id", default=0)
    depend_on_activity: int = db_field("depend_on_activity", default=0)


@dataclass
class Activity(Model):
    TABLE_NAME = "activities"

    id: int = db_field("id", _AUTO_ID, 0)
    workflow_id: int = db_field("workflow_id", default=0)
    namespace: str = db_field("namespace", default="")
    name: str = db_field("name", default="")
    image: str = db_field("image", default="")
    runtime: str = db_field("runtime", default="")
    resource_k8s_base64: str = db_field("resource_k8s_base64", default="")
    status: int = db_field("status", default=0)
    proc_id: str = db_field("proc_id", default="")
    created_at: str = db_field("created_at", default="")
    started_at: str = db_field("started_at", default="")
    finished_at: str = db_field("finished_at", default="")


@dataclass
class Logs(Model):
    TABLE_NAME = "logs"

    id: int = db_field("id", _AUTO_ID, 0)
    activity_id: int = db_field("activity_id", default=0)
    logs: str = db_field("logs", default="")
    created_at: str = db_field("created_at", _DEFAULT_NOW, "")


@dataclass
class Metrics(Model):
    TABLE_NAME = "metrics"

    id: int = db_field("id", _AUTO_ID, 0)
    activity_id: int = db_field("activity_id", default=0)
    cpu: str = db_field("cpu", default="")
    memory: str = db_field("memory", default="")
    window: str = db_field("window", default="")
    timestamp: str = db_field("timestamp", default="")
    created_at: str = db_field("created_at", _DEFAULT_NOW, "")


@dataclass
class PreActivity(Model):
    TABLE_NAME = "pre_activities"

    id: int = db_field("id", _AUTO_ID, 0)
    activity_id: int = db_field("activity_id", default=0)
    workflow_id: int = db_field("workflow_id", default=0)
    namespace: str = db_field("namespace", default="")
    name: str = db_field("name", default="")
    resource_k8s_base64: str = db_field("resource_k8s_base64", default="")
    status: int = db_field("status", default=0)
    log: str = db_field("log", default="")


@dataclass
class Runtime(Model):
    TABLE_NAME = "runtimes"

    name: str = db_field("name", "TEXT PRIMARY KEY", "")
    status: int = db_field("status", default=0)
    metadata: str = db_field("metadata", default="")
    created_at: str = db_field("created_at", default="")
    updated_at: str = db_field("updated_at", default="")
    deleted_at: str = db_field("deleted_at", default="")


@dataclass
class Storage(Model):
    TABLE_NAME = "storages"

    id: int = db_field("id", _AUTO_ID, 0)
    workflow_id: int = db_field("workflow_id", default=0)
    activity_id: int = db_field("activity_id", default=0)
    pvc_name: Optional[str] = db_field("pvc_name", default=None)
    namespace: str = db_field("namespace", default="")
    status: int = db_field("status", default=0)
    storage_mount_path: str = db_field("storage_mount_path", default="")
    storage_class: str = db_field("storage_class", default="")
    storage_size: str = db_field("storage_size", default="")
    initial_file_list: str = db_field("initial_file_list", default="")
    end_file_list: str = db_field("end_file_list", default="")
    initial_disk_spec: str = db_field("initial_disk_spec", default="")
    end_disk_spec: str = db_field("end_disk_spec", default="")
    keep_storage_after_finish: int = db_field("keep_storage_after_finish", default=0)
    detached: Optional[str] = db_field("detached", default=None)
    created_at: str = db_field("created_at", _DEFAULT_NOW, "")


@dataclass
class Workflow(Model):
    TABLE_NAME = "workflows"

    id: int = db_field("id", _AUTO_ID, 0)
    namespace: str = db_field("namespace", default="")
    name: str = db_field("name", default="")
    raw_workflow: str = db_field("raw_workflow", default="")
    status: str = db_field("status", default="")
    runtime: str = db_field("runtime", default="")
    created_at: str = db_field("created_at", default="")
    updated_at: str = db_field("updated_at", default="")
    deleted_at: str = db_field("deleted_at", default="")