"""Storage of registered runtimes and their readiness."""

from __future__ import annotations

import json
from contextlib import closing
from enum import IntEnum
from typing import Any, Optional

from akoflow.connection import Database, create_or_verify_table
from akoflow.models import Runtime as RuntimeModel
from akoflow.runtime_entity import Runtime


class RuntimeStatus(IntEnum):
    NOT_READY = 0
    READY = 1


def _encode_metadata(metadata: Optional[dict[str, str]]) -> str:
    if metadata is None:
        return "{}"
    return json.dumps(metadata, sort_keys=True, separators=(",", ":"))


def _decode_metadata(text: Optional[str]) -> Optional[dict[str, str]]:
    data: Any = json.loads(text if text is not None else "null")
    if data is None:
        return None
    if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
        raise ValueError(f"runtime metadata is not a string mapping: {text!r}")
    return data


def _to_entity(row: tuple) -> Runtime:
    name, status, metadata, created_at, updated_at = row
    return Runtime(
        name=name,
        status=status,
        metadata=_decode_metadata(metadata),
        created_at=created_at or "",
        updated_at=updated_at or "",
    )


class RuntimeRepository:
    """Reads and writes the runtimes table."""

    _SELECT = "SELECT name, status, metadata, created_at, updated_at FROM {table}"

    def __init__(self, database: Optional[Database] = None) -> None:
        self._database = database if database is not None else Database()
        model = RuntimeModel()
        self._table = model.table_name()
        with closing(self._database.connect()) as connection:
            create_or_verify_table(connection, model)

    def create_or_update(self, name: str, status: int, metadata: Optional[dict[str, str]]) -> None:
        """Insert the runtime, or update its status and metadata if it exists."""
        encoded = _encode_metadata(metadata)
        with closing(self._database.connect()) as connection:
            (count,) = connection.execute(
                f"SELECT COUNT(*) FROM {self._table} WHERE name = ?", (name,)
            ).fetchone()
            if count == 0:
                connection.execute(
                    f"INSERT INTO {self._table} (name, status, metadata, created_at, updated_at) "
                    "VALUES (?, ?, ?, datetime('now'), datetime('now'))",
                    (name, int(status), encoded),
                )
            else:
                connection.execute(
                    f"UPDATE {self._table} SET status = ?, metadata = ?, updated_at = datetime('now') "
                    "WHERE name = ?",
                    (int(status), encoded, name),
                )

    def get_all(self) -> list[Runtime]:
        with closing(self._database.connect()) as connection:
            rows = connection.execute(self._SELECT.format(table=self._table)).fetchall()
        return [_to_entity(row) for row in rows]

    def get_by_name(self, name: str) -> Runtime:
        """Return the runtime called ``name``; raise KeyError if there is none."""
        with closing(self._database.connect()) as connection:
            row = connection.execute(
                self._SELECT.format(table=self._table) + " WHERE name = ?", (name,)
            ).fetchone()
        if row is None:
            raise KeyError(name)
        return _to_entity(row)

    def update_status(self, runtime: Runtime, status: int) -> None:
        with closing(self._database.connect()) as connection:
            connection.execute(
                f"UPDATE {self._table} SET status = ?, updated_at = datetime('now') WHERE name = ?",
                (int(status), runtime.name),
            )