"""Storage of activity log output."""

from __future__ import annotations

from contextlib import closing
from dataclasses import dataclass
from typing import Optional

from akoflow.connection import Database, create_or_verify_table
from akoflow.models import Logs


@dataclass
class LogEntry:
    """A captured chunk of an activity's log."""

    activity_id: int = 0
    logs: str = ""
    id: int = 0
    created_at: str = ""


class LogsRepository:
    """Writes activity logs to the logs table."""

    def __init__(self, database: Optional[Database] = None) -> None:
        self._database = database if database is not None else Database()
        model = Logs()
        self._table = model.table_name()
        with closing(self._database.connect()) as connection:
            create_or_verify_table(connection, model)

    def create(self, entry: LogEntry) -> None:
        """Store ``entry``; the id and timestamp are assigned by the database."""
        with closing(self._database.connect()) as connection:
            connection.execute(
                f"INSERT INTO {self._table} (activity_id, logs) VALUES (?, ?)",
                (entry.activity_id, entry.logs),
            )