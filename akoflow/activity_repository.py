"""Storage of workflow activities, their dependencies and pre-activities."""

from __future__ import annotations

from contextlib import closing
from enum import IntEnum
from typing import Iterable, Optional

from akoflow.connection import Database, create_or_verify_table
from akoflow.models import Activity, ActivityDependency, PreActivity
from akoflow.workflow import Workflow
from akoflow.workflow_activity import (
    WorkflowActivity,
    WorkflowActivityDatabase,
    WorkflowActivityDependencyDatabase,
    WorkflowPreActivityDatabase,
    database_to_workflow_activity,
)


class ActivityStatus(IntEnum):
    CREATED = 0
    RUNNING = 1
    FINISHED = 2
    COMPLETED = 3


_PRE_ACTIVITY_COLUMNS = "id, activity_id, workflow_id, namespace, name, resource_k8s_base64, status, log"


def _pre_activity_from_row(row: tuple) -> WorkflowPreActivityDatabase:
    id_, activity_id, workflow_id, namespace, name, resource, status, log = row
    return WorkflowPreActivityDatabase(
        id=id_,
        activity_id=activity_id or 0,
        workflow_id=workflow_id or 0,
        namespace=namespace or "",
        name=name or "",
        resource_k8s_base64=resource,
        status=status or 0,
        log=log,
    )


class ActivityRepository:
    """Reads and writes the activities, dependencies and pre-activities tables."""

    def __init__(self, database: Optional[Database] = None) -> None:
        self._database = database if database is not None else Database()
        activity = Activity()
        dependency = ActivityDependency()
        pre_activity = PreActivity()
        self._activities = activity.table_name()
        self._dependencies = dependency.table_name()
        self._pre_activities = pre_activity.table_name()
        with closing(self._database.connect()) as connection:
            for model in (activity, dependency, pre_activity):
                create_or_verify_table(connection, model)

    def create(self, namespace: str, workflow: Workflow, activities: Iterable[WorkflowActivity]) -> None:
        """Store the activities of ``workflow`` with their pre-activities and dependencies."""
        activities = list(activities)
        self._create_activities(namespace, workflow, activities)
        name_to_id = self._name_to_id(workflow.id)
        self._create_pre_activities(namespace, workflow.id, activities, name_to_id)
        self._create_dependencies(workflow.id, activities, name_to_id)

    def _create_activities(self, namespace: str, workflow: Workflow, activities: list[WorkflowActivity]) -> None:
        runtimes = workflow.runtime_ids()
        if not runtimes:
            raise ValueError("workflow declares no runtime")
        runtime = runtimes[0]
        image = workflow.spec.image
        with closing(self._database.connect()) as connection:
            for activity in activities:
                # An activity's image or runtime carries over to the ones after it.
                if activity.image:
                    image = activity.image
                if activity.runtime:
                    runtime = activity.runtime
                connection.execute(
                    f"INSERT INTO {self._activities} (workflow_id, namespace, name, image, runtime, "
                    "resource_k8s_base64, status, created_at) VALUES (?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)",
                    (
                        workflow.id,
                        namespace,
                        activity.name,
                        image,
                        runtime,
                        activity.to_base64(),
                        int(ActivityStatus.CREATED),
                    ),
                )

    def _name_to_id(self, workflow_id: int) -> dict[str, int]:
        return {activity.name: activity.id for activity in self.get_by_workflow_id(workflow_id)}

    def _create_pre_activities(
        self,
        namespace: str,
        workflow_id: int,
        activities: list[WorkflowActivity],
        name_to_id: dict[str, int],
    ) -> None:
        with closing(self._database.connect()) as connection:
            for activity in activities:
                if activity.depends_on is None:
                    continue
                connection.execute(
                    f"INSERT INTO {self._pre_activities} (activity_id, workflow_id, namespace, name, "
                    "resource_k8s_base64, status, log) VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (
                        name_to_id.get(activity.name, 0),
                        workflow_id,
                        namespace,
                        f"preactivity-{activity.name}",
                        None,
                        int(ActivityStatus.CREATED),
                        None,
                    ),
                )

    def _create_dependencies(
        self,
        workflow_id: int,
        activities: list[WorkflowActivity],
        name_to_id: dict[str, int],
    ) -> None:
        with closing(self._database.connect()) as connection:
            for activity in activities:
                for dependency_name in activity.depends_on or []:
                    dependency_id = name_to_id.get(dependency_name, 0)
                    if dependency_id == 0:
                        continue
                    connection.execute(
                        f"INSERT INTO {self._dependencies} (workflow_id, activity_id, depend_on_activity) "
                        "VALUES (?, ?, ?)",
                        (workflow_id, name_to_id.get(activity.name, 0), dependency_id),
                    )

    def get_activities_by_workflow_ids(self, ids: Iterable[int]) -> dict[int, list[WorkflowActivity]]:
        """Map each workflow id that has activities to its activities."""
        result: dict[int, list[WorkflowActivity]] = {}
        with closing(self._database.connect()) as connection:
            for workflow_id in ids:
                rows = connection.execute(
                    f"SELECT id, workflow_id, namespace, name, image, runtime, resource_k8s_base64, status, "
                    f"proc_id, created_at, started_at, finished_at FROM {self._activities} WHERE workflow_id = ?",
                    (workflow_id,),
                ).fetchall()
                for row in rows:
                    record = WorkflowActivityDatabase(
                        id=row[0],
                        workflow_id=row[1] or 0,
                        namespace=row[2] or "",
                        name=row[3] or "",
                        image=row[4] or "",
                        runtime=row[5] or "",
                        resource_k8s_base64=row[6] or "",
                        status=row[7] or 0,
                        proc_id=row[8],
                        created_at=row[9],
                        started_at=row[10],
                        finished_at=row[11],
                    )
                    result.setdefault(workflow_id, []).append(database_to_workflow_activity(record))
        return result

    def update_status(self, activity_id: int, status: int) -> None:
        """Set the status; running stamps started_at, finished stamps finished_at.

        Other statuses leave the row untouched.
        """
        if status == ActivityStatus.FINISHED:
            query = f"UPDATE {self._activities} SET status = ?, finished_at = CURRENT_TIMESTAMP WHERE id = ?"
        elif status == ActivityStatus.RUNNING:
            query = f"UPDATE {self._activities} SET status = ?, started_at = CURRENT_TIMESTAMP WHERE id = ?"
        elif status == ActivityStatus.CREATED:
            query = f"UPDATE {self._activities} SET status = ? WHERE id = ?"
        else:
            return
        with closing(self._database.connect()) as connection:
            connection.execute(query, (int(status), activity_id))

    def update_proc_id(self, activity_id: int, pid: str) -> None:
        with closing(self._database.connect()) as connection:
            connection.execute(f"UPDATE {self._activities} SET proc_id = ? WHERE id = ?", (pid, activity_id))

    def find(self, activity_id: int) -> WorkflowActivity:
        """Return the activity with ``activity_id``; raise KeyError if there is none."""
        with closing(self._database.connect()) as connection:
            row = connection.execute(
                f"SELECT id, workflow_id, namespace, name, image, runtime, resource_k8s_base64, status, proc_id "
                f"FROM {self._activities} WHERE id = ?",
                (activity_id,),
            ).fetchone()
        if row is None:
            raise KeyError(activity_id)
        record = WorkflowActivityDatabase(
            id=row[0],
            workflow_id=row[1] or 0,
            namespace=row[2] or "",
            name=row[3] or "",
            image=row[4] or "",
            runtime=row[5] or "",
            resource_k8s_base64=row[6] or "",
            status=row[7] or 0,
            proc_id=row[8],
        )
        return database_to_workflow_activity(record)

    def get_by_workflow_id(self, workflow_id: int) -> list[WorkflowActivity]:
        with closing(self._database.connect()) as connection:
            rows = connection.execute(
                f"SELECT id, workflow_id, namespace, name, image, runtime, resource_k8s_base64, status "
                f"FROM {self._activities} WHERE workflow_id = ?",
                (workflow_id,),
            ).fetchall()
        return [
            database_to_workflow_activity(
                WorkflowActivityDatabase(
                    id=row[0],
                    workflow_id=row[1] or 0,
                    namespace=row[2] or "",
                    name=row[3] or "",
                    image=row[4] or "",
                    runtime=row[5] or "",
                    resource_k8s_base64=row[6] or "",
                    status=row[7] or 0,
                )
            )
            for row in rows
        ]

    def get_wfa_dependencies(self, workflow_id: int) -> list[WorkflowActivityDependencyDatabase]:
        with closing(self._database.connect()) as connection:
            rows = connection.execute(
                f"SELECT id, workflow_id, activity_id, depend_on_activity FROM {self._dependencies} "
                "WHERE workflow_id = ?",
                (workflow_id,),
            ).fetchall()
        return [
            WorkflowActivityDependencyDatabase(
                id=id_, workflow_id=wf_id or 0, activity_id=act_id or 0, depends_on_id=dep_id or 0
            )
            for id_, wf_id, act_id, dep_id in rows
        ]

    def find_pre_activity(self, activity_id: int) -> WorkflowPreActivityDatabase:
        """Return the pre-activity of ``activity_id``; raise KeyError if there is none."""
        with closing(self._database.connect()) as connection:
            rows = connection.execute(
                f"SELECT {_PRE_ACTIVITY_COLUMNS} FROM {self._pre_activities} WHERE activity_id = ?",
                (activity_id,),
            ).fetchall()
        if not rows:
            raise KeyError(activity_id)
        return _pre_activity_from_row(rows[-1])

    def update_pre_activity(self, activity_id: int, preactivity: WorkflowPreActivityDatabase) -> None:
        with closing(self._database.connect()) as connection:
            connection.execute(
                f"UPDATE {self._pre_activities} SET status = ?, log = ?, resource_k8s_base64 = ? "
                "WHERE activity_id = ?",
                (int(preactivity.status), preactivity.log, preactivity.resource_k8s_base64, activity_id),
            )

    def get_preactivities_completed(self) -> list[WorkflowPreActivityDatabase]:
        with closing(self._database.connect()) as connection:
            rows = connection.execute(
                f"SELECT {_PRE_ACTIVITY_COLUMNS} FROM {self._pre_activities} WHERE status = ?",
                (int(ActivityStatus.FINISHED),),
            ).fetchall()
        return [_pre_activity_from_row(row) for row in rows]