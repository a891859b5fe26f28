"""Storage of activity resource metrics."""

from __future__ import annotations

from contextlib import closing
from dataclasses import dataclass
from typing import Optional

from akoflow.connection import Database, create_or_verify_table
from akoflow.models import Metrics


@dataclass
class MetricsRecord:
    """A CPU and memory sample of an activity."""

    activity_id: int = 0
    cpu: str = ""
    memory: str = ""
    window: str = ""
    timestamp: str = ""
    id: int = 0
    created_at: str = ""


class MetricsRepository:
    """Writes metric samples to the metrics table."""

    def __init__(self, database: Optional[Database] = None) -> None:
        self._database = database if database is not None else Database()
        model = Metrics()
        self._table = model.table_name()
        with closing(self._database.connect()) as connection:
            create_or_verify_table(connection, model)

    def create(self, record: MetricsRecord) -> None:
        """Store ``record``; the id and creation time are assigned by the database."""
        with closing(self._database.connect()) as connection:
            connection.execute(
                f"INSERT INTO {self._table} (activity_id, cpu, memory, window, timestamp) "
                "VALUES (?, ?, ?, ?, ?)",
                (record.activity_id, record.cpu, record.memory, record.window, record.timestamp),
            )