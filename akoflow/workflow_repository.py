"""Storage of submitted workflows."""

from __future__ import annotations

from contextlib import closing
from enum import IntEnum
from typing import Any, Optional

from akoflow.connection import Database, create_or_verify_table
from akoflow.models import Workflow as WorkflowModel
from akoflow.workflow import Workflow, WorkflowDatabase, database_to_workflow


class WorkflowStatus(IntEnum):
    CREATED = 0
    RUNNING = 1
    FINISHED = 2


def _int(value: Any) -> int:
    return int(value) if value is not None else 0


def _str(value: Any) -> str:
    return str(value) if value is not None else ""


class WorkflowRepository:
    """Reads and writes the workflows table."""

    def __init__(self, database: Optional[Database] = None) -> None:
        self._database = database if database is not None else Database()
        model = WorkflowModel()
        self._table = model.table_name()
        with closing(self._database.connect()) as connection:
            create_or_verify_table(connection, model)

    def create(self, namespace: str, workflow: Workflow) -> int:
        """Store ``workflow`` as CREATED and return its new id."""
        with closing(self._database.connect()) as connection:
            cursor = connection.execute(
                f"INSERT INTO {self._table} (namespace, runtime, name, raw_workflow, status) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    namespace,
                    workflow.spec.runtime,
                    workflow.name,
                    workflow.to_base64(),
                    int(WorkflowStatus.CREATED),
                ),
            )
            return int(cursor.lastrowid)

    def find(self, workflow_id: int) -> Workflow:
        """Return the workflow with ``workflow_id``; raise KeyError if there is none."""
        with closing(self._database.connect()) as connection:
            row = connection.execute(
                f"SELECT id, namespace, name, raw_workflow, status FROM {self._table} WHERE id = ?",
                (workflow_id,),
            ).fetchone()
        if row is None:
            raise KeyError(workflow_id)
        id_, namespace, name, raw, status = row
        return database_to_workflow(
            WorkflowDatabase(
                id=_int(id_), namespace=_str(namespace), name=_str(name), raw_workflow=_str(raw), status=_int(status)
            )
        )

    def get_pending_workflows(self, namespace: str) -> list[Workflow]:
        """Return the workflows of ``namespace`` that are created or running."""
        with closing(self._database.connect()) as connection:
            rows = connection.execute(
                f"SELECT id, namespace, runtime, name, raw_workflow, status FROM {self._table} "
                "WHERE namespace = ? AND status IN (?, ?) ORDER BY id",
                (namespace, int(WorkflowStatus.RUNNING), int(WorkflowStatus.CREATED)),
            ).fetchall()
        return [
            database_to_workflow(
                WorkflowDatabase(
                    id=_int(id_),
                    namespace=_str(ns),
                    runtime=_str(runtime),
                    name=_str(name),
                    raw_workflow=_str(raw),
                    status=_int(status),
                )
            )
            for id_, ns, runtime, name, raw, status in rows
        ]

    def update_status(self, workflow_id: int, status: int) -> None:
        with closing(self._database.connect()) as connection:
            connection.execute(
                f"UPDATE {self._table} SET status = ? WHERE id = ?", (int(status), workflow_id)
            )

    def list_all_workflows(self, page: Optional[int] = None, per_page: Optional[int] = None) -> list[Workflow]:
        """Return workflows newest first, all of them or one zero-based page."""
        query = f"SELECT id, namespace, name, raw_workflow, status FROM {self._table} ORDER BY id DESC"
        params: tuple = ()
        if page is not None or per_page is not None:
            if page is None or per_page is None:
                raise ValueError("page and per_page must be given together")
            if page < 0 or per_page < 0:
                raise ValueError("page and per_page must not be negative")
            query += " LIMIT ? OFFSET ?"
            params = (per_page, page * per_page)
        with closing(self._database.connect()) as connection:
            rows = connection.execute(query, params).fetchall()
        return [
            database_to_workflow(
                WorkflowDatabase(
                    id=_int(id_), namespace=_str(ns), name=_str(name), raw_workflow=_str(raw), status=_int(status)
                )
            )
            for id_, ns, name, raw, status in rows
        ]