"""Tests for RowCollection conversions."""

from datetime import date
from decimal import Decimal

import pytest

from s3select.core.result import RowCollection
from s3select.core.types import Schema


@pytest.fixture
def collection():
    schema = Schema.parse("id LONG NOT NULL, name STRING, price DECIMAL, day DATE")
    return RowCollection(
        schema,
        [
            (1, "alice", Decimal("1.25"), date(2024, 1, 1)),
            (2, None, None, None),
        ],
    )


def test_sequence_protocol(collection):
    assert len(collection) == 2
    assert collection[0][1] == "alice"
    assert [row[0] for row in collection] == [1, 2]
    assert "2 rows" in repr(collection)


def test_to_dicts(collection):
    assert collection.to_dicts()[1] == {"id": 2, "name": None, "price": None, "day": None}


def test_to_dataframe(collection):
    pytest.importorskip("pandas")
    df = collection.to_dataframe()

    assert list(df.columns) == ["id", "name", "price", "day"]
    assert len(df) == 2
    assert df["name"].iloc[0] == "alice"


def test_to_arrow(collection):
    pa = pytest.importorskip("pyarrow")
    table = collection.to_arrow()

    assert table.num_rows == 2
    assert table.schema.field("id").type == pa.int64()
    assert table.column("name").to_pylist() == ["alice", None]
    assert table.column("day").to_pylist() == [date(2024, 1, 1), None]
