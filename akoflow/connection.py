"""SQLite connections and table creation for the server database."""

from __future__ import annotations

import os
import sqlite3
import threading
from pathlib import Path

from akoflow.models import Model

DATABASE_FILE = Path("storage") / "database.db"

_created_tables: set[tuple[str, str]] = set()
_created_lock = threading.Lock()


def default_database_path() -> Path:
    """Return the database location two levels above the working directory."""
    return Path(os.getcwd()) / ".." / ".." / DATABASE_FILE


class Database:
    """A SQLite database file; each :meth:`connect` opens a new connection."""

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self.path = Path(path) if path is not None else default_database_path()

    def connect(self) -> sqlite3.Connection:
        """Open an autocommitting connection, creating the parent directory."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(self.path, isolation_level=None, check_same_thread=False)


def _database_file(connection: sqlite3.Connection) -> str:
    for _seq, name, file in connection.execute("PRAGMA database_list"):
        if name == "main":
            return file or ""
    return ""


def create_or_verify_table(connection: sqlite3.Connection, model: Model) -> bool:
    """Create the table for ``model`` unless already created in this process.

    Returns True when the CREATE statement was issued, False when the table
    was known to exist already.
    """
    table = model.table_name()
    database_file = _database_file(connection)
    key = (database_file, table)
    if database_file:
        with _created_lock:
            if key in _created_tables:
                return False

    definitions = ", ".join(f"{column} {model.column_type(column)}" for column in model.columns())
    connection.execute(f"CREATE TABLE IF NOT EXISTS {table} ({definitions})")

    if database_file:
        with _created_lock:
            _created_tables.add(key)
    return True