"""Column metadata helpers for dataclass-based table models.

Each persisted attribute is declared with :func:`db_field`, which records the
column name (``db``) and, optionally, an SQL type or constraint clause
(``sql``).
"""

from __future__ import annotations

from dataclasses import Field, field, fields, is_dataclass
from typing import Any

PRIMARY_KEY_CLAUSES = ("PRIMARY KEY", "PRIMARY KEY AUTOINCREMENT")
DEFAULT_COLUMN_TYPE = "TEXT"


def db_field(db: str, sql: str | None = None, default: Any = None) -> Any:
    """Declare a dataclass attribute stored in column ``db``."""
    metadata = {"db": db}
    if sql is not None:
        metadata["sql"] = sql
    return field(default=default, metadata=metadata)


def _model_fields(model: Any) -> tuple[Field, ...]:
    if not is_dataclass(model):
        raise TypeError(f"{model!r} is not a dataclass model")
    return fields(model)


def get_columns(model: Any) -> list[str]:
    """Return the column names of ``model`` in declaration order."""
    return [f.metadata["db"] for f in _model_fields(model) if "db" in f.metadata]


def get_primary_key(model: Any) -> str:
    """Return the column whose SQL clause is exactly a primary-key clause, or ''."""
    for f in _model_fields(model):
        if f.metadata.get("sql") in PRIMARY_KEY_CLAUSES and "db" in f.metadata:
            return f.metadata["db"]
    return ""


def get_clausule_primary_key(model: Any) -> str:
    """Return the primary-key clause declared on ``model``, or ''."""
    for f in _model_fields(model):
        sql = f.metadata.get("sql")
        if sql in PRIMARY_KEY_CLAUSES:
            return sql
    return ""


def get_column_type(model: Any, column: str) -> str:
    """Return the SQL clause declared for ``column``, defaulting to TEXT."""
    for f in _model_fields(model):
        if f.metadata.get("db") == column and "sql" in f.metadata:
            return f.metadata["sql"]
    return DEFAULT_COLUMN_TYPE