from dataclasses import dataclass

import pytest

from akoflow.database import (
    db_field,
    get_clausule_primary_key,
    get_column_type,
    get_columns,
    get_primary_key,
)


@dataclass
class Sample:
    key: str = db_field("key", "PRIMARY KEY", "")
    count: int = db_field("count", "INTEGER", 0)
    note: str = db_field("note", default="")
    scratch: int = 0


@dataclass
class AutoSample:
    ident: int = db_field("ident", "PRIMARY KEY AUTOINCREMENT", 0)
    label: str = db_field("label", default="")


@dataclass
class TypedKeySample:
    ident: int = db_field("ident", "INTEGER PRIMARY KEY AUTOINCREMENT", 0)


def test_db_field_sets_default_and_sql_type():
    sample = Sample()
    assert sample.count == 0
    assert sample.key == ""
    assert get_column_type(sample, "key") == "PRIMARY KEY"


def test_columns_in_declaration_order():
    assert get_columns(Sample()) == ["key", "count", "note"]


def test_columns_from_class():
    assert get_columns(Sample) == get_columns(Sample())


def test_primary_key_exact_clause():
    assert get_primary_key(Sample()) == "key"
    assert get_primary_key(AutoSample()) == "ident"


def test_primary_key_with_type_prefix_not_found():
    assert get_primary_key(TypedKeySample()) == ""
    assert get_clausule_primary_key(TypedKeySample()) == ""


def test_primary_key_clause():
    assert get_clausule_primary_key(Sample()) == "PRIMARY KEY"
    assert get_clausule_primary_key(AutoSample()) == "PRIMARY KEY AUTOINCREMENT"


def test_column_type_declared():
    assert get_column_type(Sample(), "count") == "INTEGER"


@pytest.mark.parametrize("column", ["note", "missing", "scratch"])
def test_column_type_defaults_to_text(column):
    assert get_column_type(Sample(), column) == "TEXT"


def test_non_dataclass_rejected():
    with pytest.raises(TypeError):
        get_columns(object())