"""Storage of the persistent volumes provisioned for workflow activities."""

from __future__ import annotations

from contextlib import closing
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any, Mapping, Optional

from akoflow.connection import Database, create_or_verify_table
from akoflow.models import Storage

DETACHED_FORMAT = "%Y-%m-%d %H:%M:%S"
EMPTY_DOCUMENT = "{}"

_COLUMNS = (
    "id, workflow_id, activity_id, pvc_name, namespace, status, storage_mount_path, "
    "storage_class, storage_size, initial_file_list, end_file_list, initial_disk_spec, "
    "end_disk_spec, keep_storage_after_finish, detached, created_at"
)


class StorageStatus(IntEnum):
    NOT_CREATED = 1
    CREATED = 2
    COMPLETED = 3


@dataclass
class StorageRecord:
    """A row of the storages table."""

    id: int = 0
    workflow_id: int = 0
    activity_id: int = 0
    pvc_name: Optional[str] = None
    namespace: str = ""
    status: int = 0
    storage_mount_path: str = ""
    storage_class: str = ""
    storage_size: str = ""
    initial_file_list: str = ""
    end_file_list: str = ""
    initial_disk_spec: str = ""
    end_disk_spec: str = ""
    keep_storage_after_finish: int = 0
    detached: Optional[str] = None
    created_at: str = ""


def _int(value: Any) -> int:
    return int(value) if value is not None else 0


def _str(value: Any) -> str:
    return str(value) if value is not None else ""


def _record_from_row(row: tuple) -> StorageRecord:
    (
        id_,
        workflow_id,
        activity_id,
        pvc_name,
        namespace,
        status,
        mount_path,
        storage_class,
        storage_size,
        initial_file_list,
        end_file_list,
        initial_disk_spec,
        end_disk_spec,
        keep,
        detached,
        created_at,
    ) = row
    return StorageRecord(
        id=_int(id_),
        workflow_id=_int(workflow_id),
        activity_id=_int(activity_id),
        pvc_name=pvc_name,
        namespace=_str(namespace),
        status=_int(status),
        storage_mount_path=_str(mount_path),
        storage_class=_str(storage_class),
        storage_size=_str(storage_size),
        initial_file_list=_str(initial_file_list),
        end_file_list=_str(end_file_list),
        initial_disk_spec=_str(initial_disk_spec),
        end_disk_spec=_str(end_disk_spec),
        keep_storage_after_finish=_int(keep),
        detached=detached,
        created_at=_str(created_at),
    )


class StorageRepository:
    """Reads and writes the storages table."""

    def __init__(self, database: Optional[Database] = None) -> None:
        self._database = database if database is not None else Database()
        model = Storage()
        self._table = model.table_name()
        with closing(self._database.connect()) as connection:
            create_or_verify_table(connection, model)

    def create(
        self,
        workflow_id: int,
        namespace: str,
        status: int,
        storage_mount_path: str,
        storage_class: str,
        storage_size: str,
        activities_keep_disk: Mapping[int, bool],
    ) -> None:
        """Insert one storage row per activity, recording whether its disk is kept."""
        with closing(self._database.connect()) as connection:
            for activity_id, keep_disk in activities_keep_disk.items():
                connection.execute(
                    f"INSERT INTO {self._table} (workflow_id, activity_id, namespace, status, "
                    "storage_mount_path, storage_class, storage_size, initial_file_list, end_file_list, "
                    "initial_disk_spec, end_disk_spec, keep_storage_after_finish) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        workflow_id,
                        activity_id,
                        namespace,
                        int(status),
                        storage_mount_path,
                        storage_class,
                        storage_size,
                        EMPTY_DOCUMENT,
                        EMPTY_DOCUMENT,
                        EMPTY_DOCUMENT,
                        EMPTY_DOCUMENT,
                        int(bool(keep_disk)),
                    ),
                )

    def update(self, status: int, pvc_name: str, activity_id: int) -> None:
        """Set status and claim name of an activity's storage.

        Nothing is changed unless status and activity id are positive and the
        claim name is non-empty.
        """
        if not (status > 0 and pvc_name and activity_id > 0):
            return
        with closing(self._database.connect()) as connection:
            connection.execute(
                f"UPDATE {self._table} SET status = ?, pvc_name = ? WHERE activity_id = ?",
                (int(status), pvc_name, activity_id),
            )

    def find(self, storage_id: int) -> StorageRecord:
        """Return the storage with ``storage_id``; raise KeyError if there is none."""
        with closing(self._database.connect()) as connection:
            row = connection.execute(
                f"SELECT {_COLUMNS} FROM {self._table} WHERE id = ?", (storage_id,)
            ).fetchone()
        if row is None:
            raise KeyError(storage_id)
        return _record_from_row(row)

    def get_created_storages(self, namespace: str) -> list[StorageRecord]:
        """Return the storages of ``namespace`` whose status is CREATED."""
        with closing(self._database.connect()) as connection:
            rows = connection.execute(
                f"SELECT {_COLUMNS} FROM {self._table} WHERE namespace = ? AND status = ? ORDER BY id",
                (namespace, int(StorageStatus.CREATED)),
            ).fetchall()
        return [_record_from_row(row) for row in rows]

    def _set_column(self, column: str, activity_id: int, value: str) -> None:
        with closing(self._database.connect()) as connection:
            connection.execute(
                f"UPDATE {self._table} SET {column} = ? WHERE activity_id = ?",
                (value, activity_id),
            )

    def update_initial_file_list(self, activity_id: int, file_list: str) -> None:
        self._set_column("initial_file_list", activity_id, file_list)

    def update_end_file_list(self, activity_id: int, file_list: str) -> None:
        self._set_column("end_file_list", activity_id, file_list)

    def update_initial_disk_spec(self, activity_id: int, disk_spec: str) -> None:
        self._set_column("initial_disk_spec", activity_id, disk_spec)

    def update_end_disk_spec(self, activity_id: int, disk_spec: str) -> None:
        self._set_column("end_disk_spec", activity_id, disk_spec)

    def update_detached(self, activity_id: int) -> None:
        """Stamp the activity's storage as detached at the current local time."""
        self._set_column("detached", activity_id, datetime.now().strftime(DETACHED_FORMAT))