"""Tests for DataType and Schema."""

import pytest

from s3select.core.errors import ConfigError, UnknownColumn
from s3select.core.types import DataType, Field, Schema, resolve_schema


class TestDataType:
    """Test DataType enum."""

    def test_is_numeric(self):
        assert DataType.INTEGER.is_numeric()
        assert DataType.DOUBLE.is_numeric()
        assert DataType.DECIMAL.is_numeric()
        assert not DataType.STRING.is_numeric()
        assert not DataType.BOOLEAN.is_numeric()
        assert not DataType.DATE.is_numeric()

    def test_is_temporal(self):
        assert DataType.DATE.is_temporal()
        assert DataType.TIMESTAMP.is_temporal()
        assert not DataType.LONG.is_temporal()

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("integer", DataType.INTEGER),
            ("INT", DataType.INTEGER),
            ("bigint", DataType.LONG),
            ("varchar(20)", DataType.STRING),
            ("decimal(10,2)", DataType.DECIMAL),
            ("bool", DataType.BOOLEAN),
            ("datetime", DataType.TIMESTAMP),
            (DataType.DATE, DataType.DATE),
        ],
    )
    def test_from_name(self, name, expected):
        assert DataType.from_name(name) == expected

    def test_from_name_unknown(self):
        with pytest.raises(ConfigError, match="Unsupported data type"):
            DataType.from_name("geometry")


class TestSchema:
    """Test Schema container."""

    def test_lookup(self):
        schema = Schema([Field("id", DataType.INTEGER, False), Field("name", DataType.STRING)])

        assert len(schema) == 2
        assert "id" in schema
        assert "age" not in schema
        assert schema["name"].dtype == DataType.STRING
        assert schema.index_of("name") == 1
        assert schema.get_column_names() == ["id", "name"]
        assert schema.get_column_type("missing") is None

    def test_unknown_column(self):
        schema = Schema.from_dict({"id": "int"})

        with pytest.raises(UnknownColumn, match="Available columns: id"):
            schema["nope"]

    def test_duplicate_names_rejected(self):
        with pytest.raises(ConfigError, match="Duplicate column"):
            Schema([Field("a", DataType.STRING), Field("a", DataType.LONG)])

    def test_from_dict_is_nullable(self):
        schema = Schema.from_dict({"id": DataType.LONG, "name": "string"})

        assert [f.nullable for f in schema] == [True, True]
        assert schema.to_dict() == {"id": "LONG", "name": "STRING"}

    def test_parse_ddl(self):
        schema = Schema.parse("id INTEGER NOT NULL, price DECIMAL(10,2), ts timestamp NULL")

        assert schema.get_column_names() == ["id", "price", "ts"]
        assert schema["id"] == Field("id", DataType.INTEGER, nullable=False)
        assert schema["price"].dtype == DataType.DECIMAL
        assert schema["ts"].nullable

    def test_parse_quoted_name(self):
        schema = Schema.parse('"first name" STRING')
        assert schema.get_column_names() == ["first name"]

    def test_parse_invalid(self):
        with pytest.raises(ConfigError, match="Invalid column definition"):
            Schema.parse("id")

    def test_equality(self):
        assert Schema.parse("a INT") == Schema([Field("a", DataType.INTEGER)])
        assert Schema.parse("a INT") != Schema.parse("a INT NOT NULL")

    def test_to_arrow(self):
        pa = pytest.importorskip("pyarrow")
        arrow = Schema.parse("id LONG NOT NULL, name STRING").to_arrow()

        assert arrow.field("id").type == pa.int64()
        assert not arrow.field("id").nullable
        assert arrow.field("name").type == pa.string()


class TestResolveSchema:
    """Test schema validation at relation construction."""

    @pytest.mark.parametrize("schema", [None, "", {}, []])
    def test_missing_or_empty(self, schema):
        with pytest.raises(ConfigError, match="Schema cannot be empty"):
            resolve_schema(schema)

    def test_accepts_all_forms(self):
        expected = Schema.parse("id INTEGER")

        assert resolve_schema(expected) is expected
        assert resolve_schema("id INTEGER") == expected
        assert resolve_schema({"id": "integer"}) == expected
        assert resolve_schema([Field("id", DataType.INTEGER)]) == expected

    def test_unsupported_form(self):
        with pytest.raises(ConfigError, match="Unsupported schema definition"):
            resolve_schema(42)
