"""Tests for column pruning"""

import pytest

from s3select.core.errors import UnknownColumn
from s3select.core.types import Schema
from s3select.optimizers import prune_schema


@pytest.fixture
def schema():
    return Schema.parse("id INTEGER NOT NULL, name STRING, age INT, city STRING")


def test_keeps_declared_order(schema):
    pruned = prune_schema(schema, ["city", "id"])

    assert pruned.get_column_names() == ["id", "city"]
    assert pruned["id"].nullable is False


def test_duplicates_collapse(schema):
    pruned = prune_schema(schema, ["age", "age", "name"])

    assert pruned.get_column_names() == ["name", "age"]


@pytest.mark.parametrize(
    "columns",
    [[], ["id"], ["city", "name"], ["age", "id", "age"], ["city", "age", "name", "id"]],
)
def test_pruned_length_and_order(schema, columns):
    pruned = prune_schema(schema, columns)
    names = pruned.get_column_names()

    assert len(pruned) == len(set(columns))
    declared = schema.get_column_names()
    assert names == sorted(names, key=declared.index)


def test_all_columns_is_identity(schema):
    assert prune_schema(schema, schema.get_column_names()) == schema


def test_unknown_column(schema):
    with pytest.raises(UnknownColumn) as excinfo:
        prune_schema(schema, ["id", "email"])

    assert excinfo.value.column == "email"
    assert "Available columns: id, name, age, city" in str(excinfo.value)


def test_declared_schema_untouched(schema):
    prune_schema(schema, ["id"])

    assert len(schema) == 4
